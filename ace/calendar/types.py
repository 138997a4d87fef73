from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class Participant(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str
    display_name: Optional[str] = None


class Meeting(BaseModel):
    """A calendar event with timezone-aware start/end times."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    start_time: datetime
    end_time: datetime
    description: Optional[str] = None
    participants: List[Participant] = []
