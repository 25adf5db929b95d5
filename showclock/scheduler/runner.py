"""Tick driver for the scheduler engine.

Runs :meth:`SchedulerEngine.advance` from an APScheduler interval job. The
job is limited to one instance and coalesced, so a slow tick is never
overlapped or re-entered by the next one.
"""
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from loguru import logger

from .engine import SchedulerEngine
from .models import ScheduledProject
from .schedule import now_ms

logger = logger.bind(module="scheduler.runner")

TICK_JOB_ID = "showclock.tick"


class ScheduleRunner:
    """Calls the engine once per tick with the elapsed time since the last one."""

    def __init__(
        self,
        engine: SchedulerEngine,
        tick_ms: int = 100,
        scheduler: BaseScheduler | None = None,
    ):
        self.engine = engine
        self.tick_ms = tick_ms
        self.scheduler = scheduler or BlockingScheduler()
        self._last_ms: int | None = None

    def tick(self, now_millis: int | None = None) -> list[ScheduledProject]:
        """Advance the engine to now_millis (defaults to the wall clock)."""
        if now_millis is None:
            now_millis = now_ms()
        if self._last_ms is None:
            delta_ms = self.tick_ms
        else:
            # Wall clock stepped backwards: treat as an empty frame
            delta_ms = max(0, now_millis - self._last_ms)
        self._last_ms = now_millis
        return self.engine.advance(now_millis, delta_ms)

    def start(self) -> None:
        """Schedule the tick job and start the scheduler (blocks for BlockingScheduler)."""
        self.scheduler.add_job(
            self.tick,
            "interval",
            seconds=self.tick_ms / 1000,
            id=TICK_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        logger.info(f"Scheduler runner started, tick every {self.tick_ms}ms")
        self.scheduler.start()

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler runner stopped")
