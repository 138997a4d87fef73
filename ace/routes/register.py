from fastapi import APIRouter, Depends, Request

from ace.core.container import Services
from ace.routes.deps import get_services, require_api_key_if_configured
from ace.schemas.requests import RegisterRequest

router = APIRouter()


@router.post("/register")
async def register_user(request: Request, body: RegisterRequest, services: Services = Depends(get_services)):
    """
    Register or refresh a user session.

    The session replaces any previous registration for the same user id; the
    user's current display state is kept.
    """
    require_api_key_if_configured(request)

    session = services.sessions.register(
        user_id=body.user_id,
        credential=body.access_token,
        routines=body.routines,
        device_token=body.device_token,
        name=body.user_name,
        title=body.user_title,
        company=body.user_company,
        bio=body.user_bio,
    )
    return {
        "ok": True,
        "user_id": session.user_id,
        "routines": len(session.routines),
        "device_token": session.device_token is not None,
    }
