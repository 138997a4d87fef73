"""
Routine evaluation: (routine, meeting, now) -> optional Candidate.
"""

import logging
from datetime import datetime
from functools import partial
from typing import Callable, Optional

from ace.calendar.types import Meeting
from ace.notifications.models import Candidate, UrgencyClass
from ace.observability.logger import log_error
from ace.people.domains import looks_like_email
from ace.profile.models import Routine, RoutineKind, UserSession
from ace.services.brief_agent import FALLBACK_BRIEF, MeetingBriefAgent, UserContext
from ace.utils.cache import TTLCache

logger = logging.getLogger(__name__)

PREP_WINDOW_MINUTES = 720
HURRY_WINDOW_MINUTES = 2

BodyBuilder = Callable[[Meeting, int], str]


def minutes_until(start_time: datetime, now: datetime) -> int:
    """Whole minutes from now to start, truncated toward zero."""
    return int((start_time - now).total_seconds() / 60)


def static_prep_body(meeting: Meeting, minutes: int) -> str:
    return f"Starts in {minutes} min. Review materials."


def evaluate_routine(
    routine: Routine,
    meeting: Meeting,
    now: datetime,
    prep_body: Optional[BodyBuilder] = None,
) -> Optional[Candidate]:
    """
    Decide whether a routine fires for a meeting.

    Args:
        routine: Rule to evaluate
        meeting: Upcoming meeting
        now: Current time (timezone-aware)
        prep_body: Builds the BeforeMeeting body; defaults to the static text

    Returns:
        Candidate, or None when the routine does not apply
    """
    if not routine.enabled:
        return None

    delta = minutes_until(meeting.start_time, now)

    if routine.kind == RoutineKind.BEFORE_MEETING:
        if 0 <= delta <= PREP_WINDOW_MINUTES:
            build = prep_body or static_prep_body
            return Candidate(
                meeting=meeting,
                routine=routine,
                title=f"Prep: {meeting.title}",
                body=build(meeting, delta),
                urgency=UrgencyClass.PASSIVE,
            )
        return None

    if routine.kind == RoutineKind.DONT_BE_LATE:
        if 0 < delta <= HURRY_WINDOW_MINUTES:
            return Candidate(
                meeting=meeting,
                routine=routine,
                title=f"Hurry! {meeting.title}",
                body=f"Starts in {delta} min.",
                urgency=UrgencyClass.ACTIVE,
            )
        return None

    # AfterMeeting routines are accepted but never produce a candidate
    return None


class RoutineEvaluator:
    """
    Evaluates routines, optionally replacing the static prep body with an LLM brief.

    Rich briefs are generated once per (user, meeting) and reused for the
    rest of the prep window.
    """

    def __init__(
        self,
        brief_agent: Optional[MeetingBriefAgent] = None,
        rich_briefs: bool = False,
        brief_cache: Optional[TTLCache] = None,
    ):
        """
        Args:
            brief_agent: MeetingBriefAgent used when rich_briefs is on
            rich_briefs: Generate prep bodies with the brief agent
            brief_cache: Cache for generated briefs (defaults to one prep window TTL)
        """
        self.brief_agent = brief_agent
        self.rich_briefs = rich_briefs and brief_agent is not None
        if brief_cache is None:
            brief_cache = TTLCache(default_ttl_seconds=PREP_WINDOW_MINUTES * 60)
        self._briefs = brief_cache

    def evaluate(
        self,
        routine: Routine,
        meeting: Meeting,
        now: datetime,
        session: Optional[UserSession] = None,
    ) -> Optional[Candidate]:
        prep_body = None
        if self.rich_briefs and session is not None:
            prep_body = partial(self._rich_body, session=session)
        return evaluate_routine(routine, meeting, now, prep_body=prep_body)

    def cleanup_expired(self) -> int:
        """Drop briefs whose prep window has passed; returns the number removed."""
        return self._briefs.cleanup_expired()

    def _rich_body(self, meeting: Meeting, minutes: int, session: UserSession) -> str:
        cache_key = f"brief_{session.user_id}_{meeting.id}"
        cached = self._briefs.get(cache_key)
        if cached is not None:
            return cached

        user = UserContext(
            email=session.user_id if looks_like_email(session.user_id) else "",
            name=session.name or "",
            title=session.title,
            company=session.company,
            bio=session.bio,
        )
        try:
            brief = self.brief_agent.generate_brief(meeting, session.credential, user=user).brief
        except Exception as e:
            log_error(e, {"action": "generate_brief", "user_id": session.user_id, "meeting_id": meeting.id})
            return FALLBACK_BRIEF
        if brief != FALLBACK_BRIEF:
            self._briefs.set(cache_key, brief)
        return brief
