"""
APScheduler Configuration for Background Jobs

Runs one-shot jobs (receipt emails) off the request path. Jobs live in memory:
a receipt lost to a restart is acceptable, a slow request is not.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from apscheduler.events import EVENT_JOB_ERROR, JobExecutionEvent
from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

logger = logging.getLogger(__name__)


class NotificationScheduler:
    """
    Owned wrapper around an AsyncIOScheduler.

    Created and started in the FastAPI lifespan, shut down on exit.
    """

    def __init__(self, misfire_grace_seconds: int = 300):
        """
        Configure APScheduler with an in-memory job store.

        Configuration:
        - AsyncIOScheduler so async job functions run on the app event loop
        - Coalesce: True (a job id never runs twice for one schedule)
        - Misfire grace: jobs delayed by a busy loop still run
        """
        self._scheduler = AsyncIOScheduler(
            jobstores={"default": MemoryJobStore()},
            executors={"default": AsyncIOExecutor()},
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": misfire_grace_seconds,
            },
            timezone="UTC",
        )
        self._scheduler.add_listener(self._on_job_error, EVENT_JOB_ERROR)

        logger.info("APScheduler initialized with in-memory job store")

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        """Start the scheduler. Must be called from within the running event loop."""
        if not self._scheduler.running:
            self._scheduler.start()
            logger.info("Scheduler started")
        else:
            logger.warning("Scheduler already running")

    async def shutdown(self, wait: bool = True) -> None:
        """
        Shutdown the scheduler gracefully.

        AsyncIOScheduler may defer the actual stop to the event loop, so this
        yields until the scheduler reports it is no longer running.

        Args:
            wait: Wait for running jobs to complete before shutdown
        """
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
            while self._scheduler.running:
                await asyncio.sleep(0)
            logger.info(f"Scheduler shutdown (wait={wait})")

    def run_now(self, job_id: str, job_func: Callable[..., Any], **kwargs) -> str:
        """
        Schedule a one-shot job to run as soon as the loop is free.

        Args:
            job_id: Unique job identifier
            job_func: Sync or async callable
            **kwargs: Arguments passed to job_func

        Returns:
            Job ID
        """
        self._scheduler.add_job(
            job_func,
            trigger=DateTrigger(run_date=datetime.now(timezone.utc)),
            id=job_id,
            name=f"Notify: {job_id}",
            replace_existing=True,
            kwargs=kwargs,
        )
        logger.debug(f"Scheduled job: {job_id}")
        return job_id

    def get_job(self, job_id: str) -> Optional[Any]:
        return self._scheduler.get_job(job_id)

    @staticmethod
    def _on_job_error(event: JobExecutionEvent) -> None:
        logger.error(f"Background job {event.job_id} failed: {event.exception}")
