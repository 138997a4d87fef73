from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ace.calendar.types import Meeting, Participant
from ace.profile.models import Routine


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)
    access_token: str = Field(alias="accessToken", min_length=1)
    routines: List[Routine] = []
    device_token: Optional[str] = Field(default=None, alias="deviceToken")
    user_name: Optional[str] = Field(default=None, alias="userName")
    user_title: Optional[str] = Field(default=None, alias="userTitle")
    user_company: Optional[str] = Field(default=None, alias="userCompany")
    user_bio: Optional[str] = Field(default=None, alias="userBio")


class EnrichRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: EmailStr
    access_token: Optional[str] = Field(default=None, alias="accessToken")


class EnrichResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    company_name: Optional[str] = Field(default=None, alias="companyName")
    research_summary: Optional[str] = Field(default=None, alias="researchSummary")
    request_id: str = Field(alias="requestID")
    linkedin_title: Optional[str] = Field(default=None, alias="linkedInTitle")
    linkedin_url: Optional[str] = Field(default=None, alias="linkedInUrl")


class BriefParticipant(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    display_name: Optional[str] = Field(default=None, alias="displayName")


class BriefMeeting(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    title: str = Field(alias="summary", min_length=1)
    description: Optional[str] = None
    start_time: datetime = Field(alias="startTime")
    end_time: Optional[datetime] = Field(default=None, alias="endTime")
    participants: List[BriefParticipant] = Field(default=[], alias="attendees")

    def to_meeting(self) -> Meeting:
        return Meeting(
            id=self.id or f"adhoc-{self.start_time.isoformat()}",
            title=self.title,
            start_time=self.start_time,
            end_time=self.end_time or self.start_time,
            description=self.description,
            participants=[
                Participant(email=p.email, display_name=p.display_name) for p in self.participants
            ],
        )


class BriefRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    meeting: BriefMeeting
    access_token: str = Field(alias="accessToken")
    user_email: Optional[str] = Field(default=None, alias="userEmail")
    user_name: Optional[str] = Field(default=None, alias="userName")
    user_title: Optional[str] = Field(default=None, alias="userTitle")
    user_company: Optional[str] = Field(default=None, alias="userCompany")
    user_bio: Optional[str] = Field(default=None, alias="userBio")


class BriefResponse(BaseModel):
    brief: str
    prompt: str
