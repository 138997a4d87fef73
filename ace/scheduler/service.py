import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ace.core.container import Services
from ace.notifications.agent import CycleReport
from ace.observability.logger import log_error, log_info

logger = logging.getLogger(__name__)

AGENT_JOB_ID = "notification_agent"


class AgentScheduler:
    """
    Interval scheduler that runs the notification agent for every registered user.
    """

    def __init__(self, services: Services):
        self.services = services
        self.interval_seconds = services.config.agent_interval_seconds
        self.initial_delay_seconds = services.config.agent_initial_delay_seconds
        self.max_workers = services.config.agent_max_workers
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._last_run: Optional[datetime] = None
        self._last_report: Optional[CycleReport] = None
        self._last_error: Optional[str] = None
        self._runs = 0

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def is_enabled(self) -> bool:
        """Check if the agent loop is enabled via RUN_AGENT."""
        return self.services.config.run_agent

    def run_once(self) -> CycleReport:
        """Run one agent cycle synchronously over all registered users."""
        sessions = self.services.sessions.all_users()
        report = self.services.agent.run_cycle(sessions, max_workers=self.max_workers)
        self._last_run = report.started_at
        self._last_report = report
        self._runs += 1

        expired = self.services.agent.evaluator.cleanup_expired() + self.services.enrichment.cleanup_expired()
        if expired:
            logger.debug(f"Removed {expired} expired cache entries")
        return report

    async def _tick(self) -> None:
        try:
            await asyncio.to_thread(self.run_once)
            self._last_error = None
        except Exception as e:
            self._last_error = str(e)
            log_error(e, {"action": "agent_tick_failed", "source": "scheduled"})

    async def start(self) -> None:
        """Start the scheduler."""
        if self.running:
            logger.warning("Agent scheduler is already running")
            return

        self._scheduler = AsyncIOScheduler(timezone="UTC")
        self._scheduler.add_job(
            self._tick,
            "interval",
            seconds=self.interval_seconds,
            id=AGENT_JOB_ID,
            next_run_time=datetime.now(timezone.utc) + timedelta(seconds=self.initial_delay_seconds),
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.start()
        log_info(
            "Agent scheduler started",
            {"interval_seconds": self.interval_seconds, "initial_delay_seconds": self.initial_delay_seconds},
        )

    async def stop(self) -> None:
        """Stop the scheduler."""
        if not self.running:
            logger.warning("Agent scheduler is not running")
            return

        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Agent scheduler stopped")

    def _next_run(self) -> Optional[datetime]:
        if not self.running:
            return None
        job = self._scheduler.get_job(AGENT_JOB_ID)
        return job.next_run_time if job else None

    def get_status(self) -> Dict[str, Any]:
        """Get scheduler status."""
        next_run = self._next_run()
        return {
            "running": self.running,
            "enabled": self.is_enabled(),
            "interval_seconds": self.interval_seconds,
            "initial_delay_seconds": self.initial_delay_seconds,
            "registered_users": len(self.services.sessions),
            "runs": self._runs,
            "last_run": self._last_run.isoformat() if self._last_run else None,
            "next_run": next_run.isoformat() if next_run else None,
            "last_report": self._last_report.to_dict() if self._last_report else None,
            "last_error": self._last_error,
        }
