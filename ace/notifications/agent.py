"""
Notification agent.

One pass for one user:

    meetings x enabled routines -> candidates -> winner -> display actions -> sink

A cycle runs that pass for every registered user on a thread pool. A
failure for one user is logged and never affects the others.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from ace.calendar.provider import MeetingSource
from ace.calendar.types import Meeting
from ace.channels.push import DisplaySink
from ace.notifications.models import Candidate, DisplayAction
from ace.notifications.routines import RoutineEvaluator
from ace.notifications.selector import sort_candidates
from ace.notifications.state import DisplayStateRegistry
from ace.observability.logger import log_error, log_event, timing
from ace.profile.models import UserSession

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CycleReport:
    """Outcome of one agent cycle."""

    started_at: datetime
    users: int = 0
    succeeded: int = 0
    failed: int = 0
    actions: Dict[str, List[DisplayAction]] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    duration_ms: Optional[float] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "started_at": self.started_at.isoformat(),
            "users": self.users,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "actions": {
                user_id: [action.kind.value for action in actions]
                for user_id, actions in self.actions.items()
            },
            "errors": dict(self.errors),
            "duration_ms": round(self.duration_ms, 2) if self.duration_ms is not None else None,
        }


class NotificationAgent:
    """
    Decides what each user's display should show right now and delivers the change.
    """

    def __init__(
        self,
        meeting_source: MeetingSource,
        evaluator: RoutineEvaluator,
        display_states: DisplayStateRegistry,
        sink: DisplaySink,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.meeting_source = meeting_source
        self.evaluator = evaluator
        self.display_states = display_states
        self.sink = sink
        self.clock = clock

    def collect_candidates(self, session: UserSession, meetings: List[Meeting], now: datetime) -> List[Candidate]:
        candidates = []
        for meeting in meetings:
            for routine in session.routines:
                if not routine.enabled:
                    continue
                candidate = self.evaluator.evaluate(routine, meeting, now, session=session)
                if candidate is not None:
                    logger.debug(f"Candidate found: {candidate.title} ({candidate.urgency.value})")
                    candidates.append(candidate)
        return candidates

    def process(self, session: UserSession, meetings: List[Meeting], now: datetime) -> List[DisplayAction]:
        """
        Run one decision pass for a user over already-fetched meetings.

        Returns:
            Display actions that were delivered (possibly empty)
        """
        enabled = [r for r in session.routines if r.enabled]
        logger.info(
            f"Evaluating {len(meetings)} meetings against {len(enabled)} routines for {session.user_id}"
        )

        ranked = sort_candidates(self.collect_candidates(session, meetings, now))
        winner = ranked[0] if ranked else None

        if winner is not None:
            for candidate in ranked[1:]:
                if candidate.meeting.id != winner.meeting.id:
                    logger.info(f"Skipped candidate: {candidate.title}")

        actions = self.display_states.apply(session.user_id, winner)
        if actions:
            if winner is not None:
                logger.info(f"Setting display for {session.user_id} to: {winner.title}")
            else:
                logger.info(f"Clearing display for {session.user_id}")
            self.sink.deliver(session, actions)

        log_event(
            action="user_processed",
            component="agent",
            user_id=session.user_id,
            meetings=len(meetings),
            candidates=len(ranked),
            winner=winner.meeting.id if winner else None,
            actions=[a.kind.value for a in actions],
        )
        return actions

    def process_user(self, session: UserSession, now: Optional[datetime] = None) -> List[DisplayAction]:
        """Fetch the user's meetings and run one decision pass."""
        meetings = self.meeting_source.fetch_upcoming(session.credential)
        return self.process(session, meetings, now or self.clock())

    def run_cycle(self, sessions: List[UserSession], max_workers: int = 4) -> CycleReport:
        """
        Process every session concurrently; each user's work is sequential.

        Returns:
            CycleReport with per-user actions and errors
        """
        report = CycleReport(started_at=self.clock(), users=len(sessions))
        if not sessions:
            report.duration_ms = 0.0
            return report

        with timing("agent_cycle") as timer:
            with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(sessions)))) as pool:
                futures = {pool.submit(self.process_user, session): session for session in sessions}
                for future, session in futures.items():
                    try:
                        report.actions[session.user_id] = future.result()
                        report.succeeded += 1
                    except Exception as e:
                        report.failed += 1
                        report.errors[session.user_id] = f"{type(e).__name__}: {e}"
                        log_error(e, {"action": "user_cycle_failed", "user_id": session.user_id})

        report.duration_ms = timer.get_duration_ms()
        log_event(
            action="cycle_completed",
            component="agent",
            duration_ms=report.duration_ms,
            users=report.users,
            succeeded=report.succeeded,
            failed=report.failed,
        )
        return report
