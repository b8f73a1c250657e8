"""
Daily restart scheduling with staged player notices.
"""

from .commands import RestartCommand
from .scheduler import RestartScheduler, next_restart_after, parse_time_of_day
from .types import COUNTDOWN_SECONDS, WARNING_SECONDS, ScheduledRestart, TimerSet

__all__ = [
    "RestartCommand",
    "RestartScheduler",
    "ScheduledRestart",
    "TimerSet",
    "COUNTDOWN_SECONDS",
    "WARNING_SECONDS",
    "next_restart_after",
    "parse_time_of_day",
]
