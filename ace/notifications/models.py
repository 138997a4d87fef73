from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ace.calendar.types import Meeting
from ace.profile.models import Routine


class UrgencyClass(str, Enum):
    ACTIVE = "active"
    PASSIVE = "passive"


@dataclass(frozen=True)
class Candidate:
    """Something that could be shown for a meeting right now."""

    meeting: Meeting
    routine: Routine
    title: str
    body: str
    urgency: UrgencyClass


class ActionKind(str, Enum):
    CLEAR = "clear"
    SHOW = "show"


@dataclass(frozen=True)
class DisplayAction:
    kind: ActionKind
    title: Optional[str] = None
    body: Optional[str] = None

    @classmethod
    def clear(cls) -> "DisplayAction":
        return cls(kind=ActionKind.CLEAR)

    @classmethod
    def show(cls, title: str, body: str) -> "DisplayAction":
        return cls(kind=ActionKind.SHOW, title=title, body=body)
