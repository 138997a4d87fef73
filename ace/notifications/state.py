"""
Per-user display state.

Each user has one display slot: either Idle or Showing(meeting_id). The
state machine turns the cycle's winner into the minimal set of display
actions, so an unchanged winner never re-notifies.
"""

import threading
from typing import Dict, List, Optional

from ace.notifications.models import Candidate, DisplayAction


class NotificationStateMachine:
    """Idle / Showing(meeting_id) state for one user's display."""

    def __init__(self) -> None:
        self.current_meeting_id: Optional[str] = None

    @property
    def is_idle(self) -> bool:
        return self.current_meeting_id is None

    def transition(self, winner: Optional[Candidate]) -> List[DisplayAction]:
        """
        Apply a cycle's winner.

        Returns:
            [] when nothing changes, [clear] when the display empties,
            [clear, show] when a different meeting takes the slot
        """
        if winner is None:
            if self.current_meeting_id is None:
                return []
            self.current_meeting_id = None
            return [DisplayAction.clear()]

        if winner.meeting.id == self.current_meeting_id:
            return []

        self.current_meeting_id = winner.meeting.id
        return [DisplayAction.clear(), DisplayAction.show(winner.title, winner.body)]


class DisplayStateRegistry:
    """
    Holds one state machine per user id, each guarded by its own lock.
    """

    def __init__(self) -> None:
        self._machines: Dict[str, NotificationStateMachine] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _entry(self, user_id: str):
        with self._registry_lock:
            if user_id not in self._machines:
                self._machines[user_id] = NotificationStateMachine()
                self._locks[user_id] = threading.Lock()
            return self._machines[user_id], self._locks[user_id]

    def apply(self, user_id: str, winner: Optional[Candidate]) -> List[DisplayAction]:
        machine, lock = self._entry(user_id)
        with lock:
            return machine.transition(winner)

    def current(self, user_id: str) -> Optional[str]:
        with self._registry_lock:
            machine = self._machines.get(user_id)
            lock = self._locks.get(user_id)
        if machine is None:
            return None
        with lock:
            return machine.current_meeting_id

    def snapshot(self) -> Dict[str, Optional[str]]:
        """Meeting id currently shown, per user (None means Idle)."""
        with self._registry_lock:
            user_ids = list(self._machines)
        return {user_id: self.current(user_id) for user_id in user_ids}
