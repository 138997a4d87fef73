#!/usr/bin/env python3
"""
Show upcoming meetings from the configured meeting source.
Usage:
  GOOGLE_ACCESS_TOKEN=ya29... python scripts/show_upcoming_meetings.py
  CALENDAR_PROVIDER=mock python scripts/show_upcoming_meetings.py
"""
import argparse
import logging
import os
import sys
from datetime import datetime, timezone

from dotenv import load_dotenv

logging.basicConfig(level=logging.WARNING)  # Reduce noise

load_dotenv()
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ace.calendar.provider import select_meeting_source
from ace.core.config import load_config
from ace.notifications.routines import minutes_until


def main() -> int:
    parser = argparse.ArgumentParser(description="List upcoming meetings.")
    parser.add_argument("--token", default=os.getenv("GOOGLE_ACCESS_TOKEN", ""), help="Calendar access token")
    args = parser.parse_args()

    config = load_config()
    source = select_meeting_source(config)
    meetings = source.fetch_upcoming(args.token)
    now = datetime.now(timezone.utc)

    print("=" * 80)
    print(f"UPCOMING MEETINGS ({config.calendar_provider})")
    print("=" * 80)

    if not meetings:
        print("No upcoming meetings found.")
        return 0

    for meeting in meetings:
        print(f"\n  {meeting.title}")
        print(f"    Starts: {meeting.start_time.isoformat()} (in {minutes_until(meeting.start_time, now)} min)")
        for participant in meeting.participants:
            label = participant.display_name or participant.email
            print(f"    - {label} <{participant.email}>")

    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
