"""
Daily wall-clock trigger for background jobs.

Runs inside the application's event loop (started from the FastAPI lifespan);
the job itself is synchronous and is executed in a worker thread.
"""
import asyncio
import contextlib
import logging
from datetime import datetime, timedelta
from typing import Any, Callable

import httpx

from personnel_directory.core.clock import local_now
from personnel_directory.db.session import SessionLocal
from personnel_directory.schemas.birthday import BirthdaySummary
from personnel_directory.services.birthday import BirthdayNotifier, run_birthday_job

logger = logging.getLogger(__name__)


def seconds_until(hour: int, minute: int, now: datetime) -> float:
    """Seconds from ``now`` to the next occurrence of hour:minute (same tz as now)."""
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


class DailyTrigger:
    def __init__(
        self,
        hour: int,
        minute: int,
        job: Callable[[], Any],
        *,
        name: str = "daily_job",
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self.hour = hour
        self.minute = minute
        self.job = job
        self.name = name
        self.clock = clock
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._loop(), name=self.name)
        self._task.add_done_callback(self._on_done)
        logger.info("Scheduled %s daily at %02d:%02d", self.name, self.hour, self.minute)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def run_once(self) -> Any:
        try:
            return await asyncio.to_thread(self.job)
        except Exception:
            logger.exception("Scheduled job %s failed", self.name)
            return None

    async def _loop(self) -> None:
        while True:
            delay = seconds_until(self.hour, self.minute, self.clock())
            logger.debug("%s sleeping %.0fs until next run", self.name, delay)
            await asyncio.sleep(delay)
            await self.run_once()

    def _on_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Scheduler task %s stopped: %s", self.name, exc, exc_info=exc)


def run_scheduled_birthday_job() -> BirthdaySummary:
    db = SessionLocal()
    try:
        with httpx.Client() as client:
            summary = run_birthday_job(
                db, BirthdayNotifier(client), local_now().date(), actor="scheduler"
            )
        db.commit()
        return summary
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
