"""Background scheduler for the daily hadith rotation.

Uses APScheduler 4 AsyncScheduler to pre-compute tomorrow's schedule row
once a day (midnight UTC by default, configurable). The engine is
synchronous, so the job runs it in a worker thread.
"""

import asyncio
import logging
from contextlib import AsyncExitStack
from datetime import datetime
from typing import Any

from apscheduler import AsyncScheduler
from apscheduler.triggers.cron import CronTrigger

from ..config import Settings, settings
from ..services.daily_service import DailyHadithService, ScheduleOutcome

logger = logging.getLogger(__name__)

SCHEDULE_TOMORROW_JOB = "schedule-tomorrow"


class DailyScheduler:
    """Runs the daily scheduling job.

    Failures inside a job are logged and never escape into the scheduler,
    so one bad run does not stop the next day's.
    """

    def __init__(
        self,
        service: DailyHadithService | None = None,
        cfg: Settings | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            service: Daily hadith service. Built from settings if not provided.
            cfg: Settings for the trigger time (default: global settings)
        """
        self.cfg = cfg or settings
        self._service = service
        self._scheduler: AsyncScheduler | None = None
        self._exit_stack: AsyncExitStack | None = None
        self._running = False
        self.last_outcome: ScheduleOutcome | None = None

    @property
    def service(self) -> DailyHadithService:
        """Lazy-build the service to avoid opening the store on import."""
        if self._service is None:
            from ..services.factory import make_daily_service

            self._service = make_daily_service(self.cfg)
        return self._service

    @property
    def trigger(self) -> CronTrigger:
        """Cron trigger for the configured daily run time."""
        return CronTrigger(
            hour=self.cfg.schedule_hour,
            minute=self.cfg.schedule_minute,
            timezone=self.cfg.schedule_tzinfo,
        )

    async def start(self) -> None:
        """Start the scheduler and register the daily job."""
        if self._running:
            logger.warning("Scheduler already running")
            return

        logger.info("Starting daily scheduler...")

        self._exit_stack = AsyncExitStack()
        self._scheduler = await self._exit_stack.enter_async_context(AsyncScheduler())

        await self._scheduler.add_schedule(
            self._schedule_tomorrow,
            self.trigger,
            id=SCHEDULE_TOMORROW_JOB,
        )
        logger.info(
            f"Registered: {SCHEDULE_TOMORROW_JOB} "
            f"({self.cfg.schedule_hour:02d}:{self.cfg.schedule_minute:02d} "
            f"{self.cfg.schedule_timezone})"
        )

        await self._scheduler.start_in_background()
        self._running = True
        logger.info("Daily scheduler started")

    async def stop(self) -> None:
        """Stop the scheduler gracefully."""
        if not self._running or not self._scheduler:
            return

        logger.info("Stopping daily scheduler...")
        await self._scheduler.stop()
        if self._exit_stack is not None:
            await self._exit_stack.aclose()
        self._scheduler = None
        self._exit_stack = None
        self._running = False
        if self._service is not None:
            self._service.close()
        logger.info("Daily scheduler stopped")

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._running

    async def run_job_now(self, job_id: str) -> dict[str, Any]:
        """Run a job immediately.

        Returns:
            Result dict with "status" on success or "error" on failure
        """
        job_map = {
            SCHEDULE_TOMORROW_JOB: self._ensure_tomorrow,
        }

        if job_id not in job_map:
            return {"error": f"Unknown job: {job_id}"}

        logger.info(f"Running job manually: {job_id}")
        try:
            outcome = await job_map[job_id]()
            return {
                "status": "completed",
                "job_id": job_id,
                "date": outcome.date,
                "hadith_id": outcome.schedule.hadith_id,
                "created": outcome.created,
            }
        except Exception as e:
            logger.exception(f"Job {job_id} failed")
            return {"error": str(e), "job_id": job_id}

    def get_job_info(self) -> list[dict[str, Any]]:
        """Describe the registered jobs."""
        return [
            {
                "id": SCHEDULE_TOMORROW_JOB,
                "description": "Schedule a random active hadith for tomorrow if none is set",
                "schedule": (
                    f"Daily at {self.cfg.schedule_hour:02d}:{self.cfg.schedule_minute:02d} "
                    f"{self.cfg.schedule_timezone}"
                ),
            }
        ]

    # =========================================================================
    # Job Implementations
    # =========================================================================

    async def _ensure_tomorrow(self) -> ScheduleOutcome:
        now = datetime.now(self.cfg.schedule_tzinfo)
        outcome = await asyncio.to_thread(self.service.ensure_tomorrow_scheduled, now)
        self.last_outcome = outcome
        return outcome

    async def _schedule_tomorrow(self) -> None:
        """Scheduled entry point: ensure tomorrow has a hadith."""
        logger.info("Running daily hadith scheduling...")
        try:
            outcome = await self._ensure_tomorrow()
        except Exception:
            logger.exception("Daily hadith scheduling failed")
            return

        if outcome.created:
            logger.info(f"Scheduled hadith {outcome.schedule.hadith_id} for {outcome.date}")
        else:
            logger.info(f"Hadith already scheduled for {outcome.date}")
