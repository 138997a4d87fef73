import os
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ace.routes.deps import get_agent_scheduler
from ace.scheduler.service import AgentScheduler

router = APIRouter()


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/")
async def root():
    return {"status": "ok"}


@router.get("/healthz")
async def health_check(scheduler: AgentScheduler = Depends(get_agent_scheduler)) -> JSONResponse:
    """
    Health check endpoint with last agent cycle information.

    Returns:
        JSON response with status, agent state and observability status
    """
    status = scheduler.get_status()
    response = {
        "status": "ok",
        "timestamp": _utc_now_iso(),
        "agent": {
            "running": status["running"],
            "registered_users": status["registered_users"],
            "last_run": status["last_run"],
        },
    }

    # Add last cycle information if available
    if status["last_report"]:
        response["last_cycle"] = status["last_report"]

    obs_enabled = os.getenv("OBS_ENABLED", "false").lower() == "true"
    response["observability"] = {
        "enabled": obs_enabled,
        "sentry_configured": bool(os.getenv("SENTRY_DSN")),
    }

    return JSONResponse(status_code=200, content=response)
