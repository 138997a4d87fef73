from typing import List, Protocol

from ace.calendar.types import Meeting
from ace.core.config import AppConfig


class MeetingSource(Protocol):
    def fetch_upcoming(self, credential: str) -> List[Meeting]:
        """
        Fetch the user's upcoming meetings, ordered by start time.

        Failures degrade to an empty list; implementations never raise for
        network or parse errors.
        """
        ...


def select_meeting_source(config: AppConfig) -> MeetingSource:
    """Factory function to select the meeting source based on CALENDAR_PROVIDER."""
    provider = config.calendar_provider.lower()

    if provider == "mock":
        from ace.calendar.mock_provider import MockMeetingSource
        return MockMeetingSource()
    elif provider == "google":
        from ace.calendar.google_adapter import GoogleCalendarAdapter
        return GoogleCalendarAdapter(timeout=config.calendar_timeout_seconds)
    else:
        raise ValueError(f"Unsupported CALENDAR_PROVIDER: {provider}")
