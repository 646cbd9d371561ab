"""Wall-clock daily trigger for the ingestion job."""

import asyncio
import logging
from datetime import datetime

import schedule

from ingestion.event_log import EventLog
from ingestion.job import IngestionJob

logger = logging.getLogger(__name__)

DEFAULT_RUN_AT = "00:00"


class DailyScheduler:
    """Runs the job once a day at local ``run_at`` (HH:MM) for the life of the loop.

    The timer is a private ``schedule.Scheduler`` polled from an asyncio task.
    Overdue firings run once, late, and are never replayed per missed day.
    Each run is spawned as its own task so a slow fetch never delays polling.
    """

    def __init__(
        self,
        job: IngestionJob,
        event_log: EventLog,
        run_at: str = DEFAULT_RUN_AT,
        poll_interval: float = 1.0,
    ):
        self._job = job
        self._event_log = event_log
        self._poll_interval = poll_interval
        self._scheduler = schedule.Scheduler()
        self._scheduler.every().day.at(run_at).do(self.fire)
        self._timer: asyncio.Task | None = None
        self._runs: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def next_run(self) -> datetime | None:
        return self._scheduler.next_run

    def start(self) -> None:
        """Start polling on the running event loop. Returns immediately."""
        if self.running:
            return
        self._timer = asyncio.create_task(self._loop())
        self._event_log.record("Cron job scheduled. Waiting for next execution...")
        logger.info("Next exchange rate check at %s", self.next_run)

    async def stop(self) -> None:
        """Cancel the timer and wait for in-flight runs to finish."""
        if self._timer is not None:
            self._timer.cancel()
            await asyncio.gather(self._timer, return_exceptions=True)
            self._timer = None
        await self.drain()

    async def drain(self) -> None:
        """Wait for every spawned run to finish."""
        while self._runs:
            await asyncio.gather(*self._runs, return_exceptions=True)

    def run_pending(self) -> None:
        """Fire the job if its scheduled instant has passed."""
        self._scheduler.run_pending()

    def fire(self) -> asyncio.Task:
        """Record the trigger and spawn one job run."""
        self._event_log.record("Running daily USD to INR exchange rate check")
        task = asyncio.create_task(self._job.run())
        self._runs.add(task)
        task.add_done_callback(self._on_run_done)
        return task

    def _on_run_done(self, task: asyncio.Task) -> None:
        self._runs.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Exchange rate check crashed", exc_info=exc)
            self._event_log.record(f"Error running exchange rate check: {exc}")

    async def _loop(self) -> None:
        while True:
            self.run_pending()
            idle = self._scheduler.idle_seconds
            delay = self._poll_interval if idle is None else min(idle, self._poll_interval)
            await asyncio.sleep(max(delay, 0.0))
