from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from ace.calendar.types import Meeting, Participant


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MockMeetingSource:
    """
    Local meeting source that needs no credentials.

    Always yields one external meeting starting five minutes from now, so the
    agent loop produces a prep notification on the first tick.
    """

    def __init__(self, meetings: Optional[List[Meeting]] = None, clock: Callable[[], datetime] = _utcnow) -> None:
        self._meetings = meetings
        self._clock = clock

    def fetch_upcoming(self, credential: str) -> List[Meeting]:
        if self._meetings is not None:
            return list(self._meetings)

        now = self._clock()
        return [
            Meeting(
                id="mock-external-strategy-sync",
                title="External Strategy Sync",
                start_time=now + timedelta(minutes=5),
                end_time=now + timedelta(minutes=35),
                description="Review partnership opportunities.",
                participants=[
                    Participant(email="sarah@external.com", display_name="Sarah External"),
                ],
            )
        ]
