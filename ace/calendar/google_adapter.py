import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx

from ace.calendar.types import Meeting, Participant

logger = logging.getLogger(__name__)

GOOGLE_EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/primary/events"


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp; None for missing or unparseable values."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class GoogleCalendarAdapter:
    """Google Calendar v3 adapter that fetches upcoming events and normalizes them to Meeting objects."""

    def __init__(
        self,
        timeout: float = 15.0,
        http_client: Optional[httpx.Client] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.timeout = timeout
        self._client = http_client
        self._clock = clock

    def _normalize_participants(self, raw_attendees: List[Dict[str, Any]]) -> List[Participant]:
        participants = []
        for attendee in raw_attendees or []:
            email = (attendee.get("email") or "").strip()
            if not email:
                continue
            participants.append(Participant(email=email, display_name=attendee.get("displayName")))
        return participants

    def _normalize_event(self, item: Dict[str, Any]) -> Optional[Meeting]:
        if item.get("status") == "cancelled":
            return None

        title = item.get("summary")
        # All-day events carry "date" instead of "dateTime"
        start = _parse_datetime((item.get("start") or {}).get("dateTime"))
        end = _parse_datetime((item.get("end") or {}).get("dateTime"))
        event_id = item.get("id")
        if not title or start is None or end is None or not event_id:
            return None

        return Meeting(
            id=event_id,
            title=title,
            start_time=start,
            end_time=end,
            description=item.get("description"),
            participants=self._normalize_participants(item.get("attendees", [])),
        )

    def fetch_upcoming(self, credential: str) -> List[Meeting]:
        if not credential:
            logger.error("No access token provided for calendar fetch")
            return []

        params = {
            "singleEvents": "true",
            "orderBy": "startTime",
            "timeMin": self._clock().isoformat(),
        }
        headers = {"Authorization": f"Bearer {credential}"}

        try:
            if self._client is not None:
                response = self._client.get(GOOGLE_EVENTS_URL, headers=headers, params=params, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.get(GOOGLE_EVENTS_URL, headers=headers, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Calendar fetch error: {type(e).__name__}: {e}")
            return []

        if response.status_code != 200:
            logger.error(f"Calendar API failed: {response.status_code}")
            return []

        try:
            data = response.json()
        except ValueError:
            logger.error("Calendar API returned an unreadable body")
            return []

        items = data.get("items") if isinstance(data, dict) else None
        meetings = []
        for item in items or []:
            if not isinstance(item, dict):
                continue
            meeting = self._normalize_event(item)
            if meeting is not None:
                meetings.append(meeting)

        logger.info(f"Found {len(meetings)} meetings from Google Calendar")
        return meetings
