"""
Cancelable timed callbacks.

The restart scheduler only depends on the `TimerFactory` protocol, so tests
can drive it with a fake clock. `APSchedulerTimers` is the production
implementation on top of APScheduler's asyncio scheduler.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from .logger import logger

TimerCallback = Callable[[], None]


class Timer(Protocol):
    """Handle to a scheduled callback."""

    @property
    def alive(self) -> bool: ...

    def kill(self) -> None:
        """Cancel the callback. Killing a dead timer is a no-op."""
        ...


class TimerFactory(Protocol):
    def schedule(
        self, delay: float, callback: TimerCallback, repeat: bool = False
    ) -> Timer:
        """
        Run `callback` after `delay` seconds, then every `delay` seconds if
        `repeat` is set.
        """
        ...


class ScheduledJob:
    """Timer handle backed by an APScheduler job."""

    def __init__(self, scheduler: AsyncIOScheduler, job: Job, repeat: bool):
        self._scheduler = scheduler
        self._job_id = job.id
        self._repeat = repeat
        self._killed = False
        self._fired = False

    @property
    def alive(self) -> bool:
        if self._killed:
            return False
        return self._repeat or not self._fired

    def mark_fired(self) -> None:
        self._fired = True

    def kill(self) -> None:
        if self._killed:
            return
        self._killed = True
        try:
            self._scheduler.remove_job(self._job_id)
        except JobLookupError:
            # One-shot jobs are dropped by the scheduler once they have run
            pass


class APSchedulerTimers:
    """
    TimerFactory running callbacks on an AsyncIOScheduler.

    Callbacks are wrapped in coroutines so the AsyncIOExecutor runs them on
    the event loop itself rather than in a worker thread. Every callback
    therefore runs on the same thread as event handlers and commands.
    """

    def __init__(self, scheduler: Optional[AsyncIOScheduler] = None):
        self.scheduler = scheduler or AsyncIOScheduler()

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Timer scheduler started")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Timer scheduler stopped")

    def schedule(
        self, delay: float, callback: TimerCallback, repeat: bool = False
    ) -> ScheduledJob:
        if repeat:
            trigger = IntervalTrigger(seconds=delay)
        else:
            trigger = DateTrigger(
                run_date=datetime.now(timezone.utc) + timedelta(seconds=delay)
            )

        handle: Optional[ScheduledJob] = None

        async def run() -> None:
            if handle is None or not handle.alive:
                return
            if not repeat:
                handle.mark_fired()
            callback()

        job = self.scheduler.add_job(
            run,
            trigger,
            name=getattr(callback, "__qualname__", repr(callback)),
            misfire_grace_time=None,
            coalesce=True,
            max_instances=1,
        )
        handle = ScheduledJob(self.scheduler, job, repeat)
        return handle
