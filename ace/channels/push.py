"""
Display delivery.

Sinks receive the state machine's actions for a user. Delivery is
fire-and-forget: a sink logs its own failures and never raises into the
agent loop.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

from ace.core.config import AppConfig
from ace.notifications.models import ActionKind, DisplayAction
from ace.observability.logger import log_event
from ace.profile.models import UserSession

logger = logging.getLogger(__name__)


class DisplaySink(ABC):
    """Base interface for lock-screen delivery."""

    @abstractmethod
    def show_item(self, session: UserSession, title: str, body: str) -> None:
        ...

    @abstractmethod
    def clear_item(self, session: UserSession) -> None:
        ...

    def deliver(self, session: UserSession, actions: List[DisplayAction]) -> None:
        for action in actions:
            if action.kind == ActionKind.CLEAR:
                self.clear_item(session)
            else:
                self.show_item(session, action.title or "", action.body or "")


class ConsolePushSink(DisplaySink):
    """Logs pushes instead of sending them."""

    driver = "console"

    def show_item(self, session: UserSession, title: str, body: str) -> None:
        logger.info(f"[PUSH] [VISIBLE] Title: '{title}' Body: '{body}'")
        log_event(
            action="display_show",
            component="push",
            user_id=session.user_id,
            title=title,
            device_registered=session.device_token is not None,
        )

    def clear_item(self, session: UserSession) -> None:
        logger.info("[PUSH] [SILENT CLEAR] Sending request to clear lock screen")
        log_event(action="display_clear", component="push", user_id=session.user_id)


class RecordingSink(DisplaySink):
    """Keeps delivered actions in memory, per user."""

    driver = "memory"

    def __init__(self) -> None:
        self.delivered = {}

    def show_item(self, session: UserSession, title: str, body: str) -> None:
        self.delivered.setdefault(session.user_id, []).append(DisplayAction.show(title, body))

    def clear_item(self, session: UserSession) -> None:
        self.delivered.setdefault(session.user_id, []).append(DisplayAction.clear())


def select_display_sink(config: AppConfig) -> DisplaySink:
    """Factory function to select the push driver based on PUSH_DRIVER."""
    driver = config.push_driver.lower()
    if driver == "console":
        return ConsolePushSink()
    if driver == "memory":
        return RecordingSink()
    raise ValueError(f"Unsupported PUSH_DRIVER: {driver}")
