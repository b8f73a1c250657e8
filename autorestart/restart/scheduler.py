"""
Restart Scheduler - arms the daily restart and its staged player notices.

A restart cycle is a set of four timers: the final restart, the 30 second
warning, the start of the 10 second countdown and the countdown tick itself.
Every (re)schedule tears the previous set down before arming a new one, so
at most one cycle is ever live.
"""

import math
from datetime import datetime, time, timedelta
from typing import Callable, Optional

from ..config import RestartSettings
from ..host import ServerHost
from ..logger import logger
from ..notifier import Notifier
from ..timers import TimerFactory
from .types import COUNTDOWN_SECONDS, WARNING_SECONDS, ScheduledRestart, TimerSet

TIME_OF_DAY_FORMATS = ("%H:%M:%S", "%H:%M")


def parse_time_of_day(value: str) -> Optional[time]:
    """
    Parse a configured restart time.

    Args:
        value: "HH:MM:SS" (or "HH:MM")

    Returns:
        The time of day, or None if the value is malformed
    """
    for fmt in TIME_OF_DAY_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    return None


def next_restart_after(now: datetime, restart_time: time) -> datetime:
    """Return the first instant strictly after `now` at `restart_time`."""
    next_restart = datetime.combine(now.date(), restart_time, tzinfo=now.tzinfo)
    if next_restart <= now:
        next_restart += timedelta(days=1)
    return next_restart


class RestartScheduler:
    """
    Owns the pending restart cycle.

    All methods are expected to run on the event loop thread, the same one
    that runs timer callbacks, so no locking is done here.
    """

    def __init__(
        self,
        config: RestartSettings,
        timers: TimerFactory,
        notifier: Notifier,
        host: ServerHost,
        now: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the restart scheduler.

        Args:
            config: Restart settings; may be replaced on config reload
            timers: Factory for cancelable timed callbacks
            notifier: Fan-out for player notices
            host: Host whose `terminate` ends the process
            now: Clock returning the current local time
        """
        self.config = config
        self.timers = timers
        self.notifier = notifier
        self.host = host
        self.now = now

        self.timer_set = TimerSet()
        self.countdown_seconds = 0
        self.scheduled: Optional[ScheduledRestart] = None

    def schedule_auto_restart(self, reason: str) -> Optional[ScheduledRestart]:
        """
        Schedule the next daily restart from the configured time of day.

        A malformed time leaves any existing schedule untouched.

        Args:
            reason: Why scheduling was triggered, for the log

        Returns:
            The armed restart, or None if nothing was armed
        """
        restart_time = parse_time_of_day(self.config.auto_restart_time)
        if restart_time is None:
            logger.error(
                f"Invalid auto_restart_time format: {self.config.auto_restart_time!r}. "
                "Expected format: HH:MM:SS"
            )
            return None

        return self.schedule_restart_at(
            next_restart_after(self.now(), restart_time), reason
        )

    def schedule_restart_at(
        self, restart_at: datetime, reason: str
    ) -> Optional[ScheduledRestart]:
        """
        Replace any pending cycle with a restart at `restart_at`.

        A restart instant that is not in the future restarts the server right
        away, without notices.

        Returns:
            The armed restart, or None if the server was restarted immediately
        """
        delay = (restart_at - self.now()).total_seconds()
        if delay < 0:
            delay = 0.0

        self.clear_scheduled_timers()

        if delay <= 0:
            self.restart_server()
            return None

        self.timer_set.restart = self.timers.schedule(delay, self.restart_server)
        self._schedule_warning_and_countdown(delay)

        self.scheduled = ScheduledRestart(target=restart_at, reason=reason, delay=delay)
        logger.info(
            f"Next restart scheduled for {restart_at:%Y-%m-%d %H:%M:%S} "
            f"(in {delay:.0f}s). Reason: {reason}"
        )
        return self.scheduled

    def _schedule_warning_and_countdown(self, delay: float) -> None:
        # Short delays get their notice immediately, never zero notices
        remaining = max(1, math.ceil(delay))

        if delay > WARNING_SECONDS:
            self.timer_set.warning = self.timers.schedule(
                delay - WARNING_SECONDS,
                lambda: self.notifier.notify_warning(WARNING_SECONDS),
            )
        else:
            self.notifier.notify_warning(remaining)

        if delay > COUNTDOWN_SECONDS:
            self.timer_set.countdown_start = self.timers.schedule(
                delay - COUNTDOWN_SECONDS,
                lambda: self.start_countdown(COUNTDOWN_SECONDS),
            )
        else:
            self.start_countdown(remaining)

    def start_countdown(self, seconds: int) -> None:
        """Show `seconds`, `seconds - 1`, ..., 1, one per second."""
        if seconds <= 0:
            return

        if self.timer_set.countdown is not None:
            self.timer_set.countdown.kill()

        self.countdown_seconds = seconds
        self.timer_set.countdown = self.timers.schedule(
            1.0, self._countdown_tick, repeat=True
        )
        self._countdown_tick()

    def _countdown_tick(self) -> None:
        if self.countdown_seconds <= 0:
            if self.timer_set.countdown is not None:
                self.timer_set.countdown.kill()
                self.timer_set.countdown = None
            return

        self.notifier.notify_countdown(self.countdown_seconds)
        self.countdown_seconds -= 1

    def clear_scheduled_timers(self) -> None:
        """Cancel the pending cycle, if any. Safe to call repeatedly."""
        live = self.timer_set.live()
        if live:
            logger.debug(f"Cancelling {len(live)} pending restart timers")
        self.timer_set.clear()
        self.countdown_seconds = 0
        self.scheduled = None

    def restart_server(self) -> None:
        """Tell everyone, drop the pending cycle and terminate the host."""
        logger.info("Restarting server...")
        self.notifier.notify_restarting()
        self.clear_scheduled_timers()
        self.host.terminate()
