import asyncio

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ace.core.container import Services
from ace.routes.deps import get_agent_scheduler, get_services, require_api_key_if_configured
from ace.scheduler.service import AgentScheduler

router = APIRouter()


@router.get("/agent/status")
async def get_agent_status(scheduler: AgentScheduler = Depends(get_agent_scheduler)) -> JSONResponse:
    """
    Get agent scheduler status and the last cycle report.
    """
    return JSONResponse(status_code=200, content={"ok": True, "agent": scheduler.get_status()})


@router.post("/agent/start")
async def start_agent(request: Request, scheduler: AgentScheduler = Depends(get_agent_scheduler)) -> JSONResponse:
    """
    Start the agent scheduler.
    """
    require_api_key_if_configured(request)

    if scheduler.running:
        message = "Agent is already running"
    else:
        await scheduler.start()
        message = "Agent started successfully"

    return JSONResponse(status_code=200, content={"ok": True, "message": message, "agent": scheduler.get_status()})


@router.post("/agent/stop")
async def stop_agent(request: Request, scheduler: AgentScheduler = Depends(get_agent_scheduler)) -> JSONResponse:
    """
    Stop the agent scheduler.
    """
    require_api_key_if_configured(request)

    if not scheduler.running:
        message = "Agent is not running"
    else:
        await scheduler.stop()
        message = "Agent stopped successfully"

    return JSONResponse(status_code=200, content={"ok": True, "message": message, "agent": scheduler.get_status()})


@router.post("/agent/run")
async def run_agent_now(request: Request, scheduler: AgentScheduler = Depends(get_agent_scheduler)) -> JSONResponse:
    """
    Run one agent cycle immediately over all registered users.
    """
    require_api_key_if_configured(request)

    report = await asyncio.to_thread(scheduler.run_once)
    return JSONResponse(status_code=200, content={"ok": True, "report": report.to_dict()})


@router.get("/agent/display")
async def get_display_state(request: Request, services: Services = Depends(get_services)) -> JSONResponse:
    """
    Meeting id currently on each user's display (null means nothing is shown).
    """
    require_api_key_if_configured(request)
    return JSONResponse(status_code=200, content={"ok": True, "display": services.display_states.snapshot()})
