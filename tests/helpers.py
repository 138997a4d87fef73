from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from ace.calendar.types import Meeting, Participant
from ace.profile.models import Routine, RoutineKind, UserSession
from ace.research.types import SearchHit

NOW = datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)


def make_meeting(
    meeting_id: str = "m1",
    title: str = "Strategy Sync",
    starts_in: timedelta = timedelta(minutes=30),
    now: datetime = NOW,
    participants: Optional[List[Participant]] = None,
    description: Optional[str] = None,
) -> Meeting:
    start = now + starts_in
    return Meeting(
        id=meeting_id,
        title=title,
        start_time=start,
        end_time=start + timedelta(minutes=30),
        description=description,
        participants=participants or [],
    )


def make_routine(kind: RoutineKind, enabled: bool = True, routine_id: Optional[str] = None) -> Routine:
    return Routine(id=routine_id or kind.name.lower(), kind=kind, enabled=enabled, description="")


def make_session(user_id: str = "jane@acme.com", credential: str = "token-1", routines=None, **kwargs) -> UserSession:
    if routines is None:
        routines = [make_routine(RoutineKind.BEFORE_MEETING), make_routine(RoutineKind.DONT_BE_LATE)]
    return UserSession(user_id=user_id, credential=credential, routines=routines, **kwargs)


def hit(title: str, link: str, snippet: str = "") -> SearchHit:
    return SearchHit(title=title, snippet=snippet, link=link)


class FakeMeetingSource:
    """Meetings keyed by credential; an Exception value is raised instead of returned."""

    def __init__(self, by_credential: Optional[Dict[str, object]] = None):
        self.by_credential = by_credential or {}
        self.calls = []

    def fetch_upcoming(self, credential: str) -> List[Meeting]:
        self.calls.append(credential)
        value = self.by_credential.get(credential, [])
        if isinstance(value, Exception):
            raise value
        return list(value)
