from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class RoutineKind(str, Enum):
    BEFORE_MEETING = "Before Meeting Prep"
    DONT_BE_LATE = "Don't Be Late"
    AFTER_MEETING = "After Meeting Actions"


class Routine(BaseModel):
    """A user-defined notification rule."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    kind: RoutineKind = Field(alias="type")
    enabled: bool = Field(default=True, alias="isEnabled")
    description: str = Field(default="", alias="routineDescription")


class UserSession(BaseModel):
    """A registered user: calendar credential, routines and optional brief context."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    credential: str
    routines: List[Routine] = []
    device_token: Optional[str] = None
    name: Optional[str] = None
    title: Optional[str] = None
    company: Optional[str] = None
    bio: Optional[str] = None
