"""Scheduler service - optional periodic alert passes.

The alert endpoint is normally hit by an external scheduler. Setting
ALERT_SCHEDULE_ENABLED runs the same pass in-process instead.
"""
import logging
from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..config import settings
from .alerter import AlertOrchestrator, get_alert_orchestrator

logger = logging.getLogger(__name__)

ALERT_JOB_ID = "sync_failure_alerts"


class SchedulerService:
    """Service for running alert passes on a fixed interval."""

    def __init__(self, orchestrator_factory: Callable[[], AlertOrchestrator] = get_alert_orchestrator):
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._running = False
        self._orchestrator_factory = orchestrator_factory

    @property
    def running(self) -> bool:
        return self._running

    def start(self, interval_minutes: Optional[int] = None):
        """Start the scheduler."""
        if self._running:
            return

        interval = interval_minutes or settings.alert_interval_minutes
        self.scheduler = AsyncIOScheduler()

        # max_instances=1 keeps passes in this process from overlapping
        self.scheduler.add_job(
            self._run_alert_pass,
            trigger=IntervalTrigger(minutes=interval),
            id=ALERT_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

        self.scheduler.start()
        self._running = True
        logger.info(f"Scheduler started (alert pass every {interval} min)")

    def stop(self):
        """Stop the scheduler."""
        if self.scheduler and self._running:
            self.scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Scheduler stopped")

    async def _run_alert_pass(self):
        """Run one alert pass, logging instead of raising."""
        try:
            results = await self._orchestrator_factory().run_alert_pass()
            logger.debug(f"Scheduled alert pass: {results.model_dump()}")
        except Exception as e:
            logger.error(f"Error running scheduled alert pass: {e}")


# Global instance
scheduler_service = SchedulerService()
