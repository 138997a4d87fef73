import threading
from datetime import timedelta

from ace.notifications.models import ActionKind, Candidate, DisplayAction, UrgencyClass
from ace.notifications.state import DisplayStateRegistry, NotificationStateMachine
from ace.profile.models import RoutineKind
from tests.helpers import make_meeting, make_routine


def _winner(meeting_id: str, title: str = "Prep: Sync") -> Candidate:
    return Candidate(
        meeting=make_meeting(meeting_id=meeting_id, starts_in=timedelta(minutes=30)),
        routine=make_routine(RoutineKind.BEFORE_MEETING),
        title=title,
        body="Starts in 30 min. Review materials.",
        urgency=UrgencyClass.PASSIVE,
    )


class TestNotificationStateMachine:
    """Test display transitions."""

    def test_idle_to_showing(self):
        machine = NotificationStateMachine()
        actions = machine.transition(_winner("m1"))
        assert actions == [
            DisplayAction.clear(),
            DisplayAction.show("Prep: Sync", "Starts in 30 min. Review materials."),
        ]
        assert machine.current_meeting_id == "m1"

    def test_same_winner_is_idempotent(self):
        machine = NotificationStateMachine()
        machine.transition(_winner("m1"))
        assert machine.transition(_winner("m1", title="Prep: Renamed")) == []
        assert machine.transition(_winner("m1")) == []

    def test_switch_to_other_meeting(self):
        machine = NotificationStateMachine()
        machine.transition(_winner("m1"))
        actions = machine.transition(_winner("m2", title="Hurry! Other"))
        assert [a.kind for a in actions] == [ActionKind.CLEAR, ActionKind.SHOW]
        assert actions[1].title == "Hurry! Other"
        assert machine.current_meeting_id == "m2"

    def test_showing_to_idle(self):
        machine = NotificationStateMachine()
        machine.transition(_winner("m1"))
        assert machine.transition(None) == [DisplayAction.clear()]
        assert machine.is_idle

    def test_idle_stays_idle(self):
        machine = NotificationStateMachine()
        assert machine.transition(None) == []
        assert machine.transition(None) == []


class TestDisplayStateRegistry:
    """Test per-user isolation."""

    def test_users_are_independent(self):
        registry = DisplayStateRegistry()
        assert len(registry.apply("alice", _winner("m1"))) == 2
        assert len(registry.apply("bob", _winner("m1"))) == 2
        assert registry.apply("alice", None) == [DisplayAction.clear()]
        assert registry.snapshot() == {"alice": None, "bob": "m1"}

    def test_unknown_user_is_idle(self):
        assert DisplayStateRegistry().current("nobody") is None

    def test_concurrent_apply_shows_once(self):
        registry = DisplayStateRegistry()
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(registry.apply("alice", _winner("m1")))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        non_empty = [r for r in results if r]
        assert len(non_empty) == 1
        assert registry.current("alice") == "m1"
