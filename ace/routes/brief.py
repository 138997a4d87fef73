import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from ace.core.container import Services
from ace.routes.deps import get_services, require_api_key_if_configured
from ace.schemas.requests import BriefRequest, BriefResponse
from ace.services.brief_agent import UserContext

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/generate-brief", response_model=BriefResponse)
def generate_brief(request: Request, body: BriefRequest, services: Services = Depends(get_services)):
    """Generate a pre-meeting brief on demand."""
    require_api_key_if_configured(request)

    meeting_in = body.meeting
    if meeting_in.start_time.tzinfo is None:
        raise HTTPException(status_code=400, detail="meeting.startTime must include a timezone offset")
    if meeting_in.end_time is not None and meeting_in.end_time.tzinfo is None:
        raise HTTPException(status_code=400, detail="meeting.endTime must include a timezone offset")
    if meeting_in.end_time is not None and meeting_in.end_time < meeting_in.start_time:
        raise HTTPException(status_code=400, detail="meeting.endTime must not be before meeting.startTime")

    meeting = meeting_in.to_meeting()
    logger.info(f"On-demand brief request for: {meeting.title}")

    user = UserContext(
        email=body.user_email or "",
        name=body.user_name or "",
        title=body.user_title,
        company=body.user_company,
        bio=body.user_bio,
    )
    result = services.brief_agent.generate_brief(meeting, body.access_token, user=user)
    return BriefResponse(brief=result.brief, prompt=result.prompt)
