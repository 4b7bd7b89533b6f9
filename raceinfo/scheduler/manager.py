"""Scheduler manager for background jobs."""

import logging
from typing import Any, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from raceinfo.snapshot.cache import SnapshotCache

logger = logging.getLogger(__name__)

DAILY_REFRESH_JOB_ID = "daily_snapshot_refresh"


class SchedulerManager:
    """Manages background job scheduling."""

    def __init__(self, timezone):
        self.timezone = timezone
        self.scheduler = AsyncIOScheduler(timezone=timezone)
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        """Start the scheduler."""
        if not self._started:
            self.scheduler.start()
            self._started = True
            logger.info("Scheduler started")

    async def stop(self) -> None:
        """Stop the scheduler."""
        if self._started:
            self.scheduler.shutdown(wait=False)
            self._started = False
            logger.info("Scheduler stopped")

    def add_job(self, job_id: str, func: Callable, **cron_kwargs) -> None:
        """Add a cron job to the scheduler.

        Args:
            job_id: Unique identifier for the job
            func: The async function to run
            **cron_kwargs: Arguments for the cron trigger (hour, minute, ...)
        """
        cron_kwargs.setdefault("timezone", self.timezone)
        self.scheduler.add_job(
            func,
            CronTrigger(**cron_kwargs),
            id=job_id,
            replace_existing=True,
            misfire_grace_time=60,
        )
        logger.info(f"Added job: {job_id} with cron trigger")

    def get_job(self, job_id: str) -> Optional[Any]:
        """Get a job by ID."""
        return self.scheduler.get_job(job_id)

    def setup_daily_refresh(self, cache: SnapshotCache, hour: int = 0, minute: int = 5) -> None:
        """Start a new cache generation every day and warm it."""

        async def refresh_snapshot():
            logger.info("Daily refresh: rebuilding race data snapshot")
            snapshot = await cache.refresh()
            if snapshot.available:
                logger.info(f"Daily refresh: {len(snapshot.races)} races cached")
            else:
                logger.error(f"Daily refresh: race data unavailable ({snapshot.error})")

        self.add_job(DAILY_REFRESH_JOB_ID, refresh_snapshot, hour=hour, minute=minute)
