from fastapi import HTTPException, Request

from ace.core.container import Services
from ace.scheduler.service import AgentScheduler


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_agent_scheduler(request: Request) -> AgentScheduler:
    return request.app.state.scheduler


def require_api_key_if_configured(request: Request) -> None:
    api_key = get_services(request).config.api_key
    if not api_key:
        return
    provided = request.headers.get("x-api-key") or request.headers.get("X-API-Key")
    if provided != api_key:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")
