import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from ace.core.container import Services, build_services
from ace.observability.logger import init_sentry
from ace.routes.agent import router as agent_router
from ace.routes.brief import router as brief_router
from ace.routes.enrich import router as enrich_router
from ace.routes.health import router as health_router
from ace.routes.register import router as register_router
from ace.scheduler.service import AgentScheduler

logger = logging.getLogger("ace")
logging.basicConfig(level=logging.INFO)


def create_app(services: Optional[Services] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        services: Pre-built service graph (tests pass one with fakes); built from env otherwise
    """
    init_sentry()
    services = services or build_services()
    scheduler = AgentScheduler(services)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if scheduler.is_enabled():
            await scheduler.start()
        else:
            logger.info("Agent loop disabled (RUN_AGENT=0)")
        try:
            yield
        finally:
            if scheduler.running:
                await scheduler.stop()

    app = FastAPI(title="Ace Agent", lifespan=lifespan)
    app.state.services = services
    app.state.scheduler = scheduler

    app.include_router(health_router, tags=["health"])
    app.include_router(register_router, tags=["sessions"])
    app.include_router(enrich_router, tags=["enrichment"])
    app.include_router(brief_router, tags=["briefs"])
    app.include_router(agent_router, tags=["agent"])
    return app


app = create_app()
