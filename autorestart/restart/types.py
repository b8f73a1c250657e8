"""
Type definitions for the restart scheduler.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Iterator, Optional

from ..timers import Timer

# Lead times before the restart instant, in seconds
WARNING_SECONDS = 30
COUNTDOWN_SECONDS = 10


@dataclass(frozen=True)
class ScheduledRestart:
    """The restart cycle currently armed."""

    target: datetime
    reason: str
    delay: float


@dataclass
class TimerSet:
    """
    Timer handles making up one pending restart cycle.

    Either every handle is None/dead, or together they represent exactly one
    cycle. Use `clear` before arming a new cycle.
    """

    restart: Optional[Timer] = None
    warning: Optional[Timer] = None
    countdown_start: Optional[Timer] = None
    countdown: Optional[Timer] = None

    def __iter__(self) -> Iterator[Optional[Timer]]:
        for f in fields(self):
            yield getattr(self, f.name)

    def clear(self) -> None:
        """Kill every handle and forget it."""
        for f in fields(self):
            timer = getattr(self, f.name)
            if timer is not None:
                timer.kill()
            setattr(self, f.name, None)

    def live(self) -> list[Timer]:
        return [timer for timer in self if timer is not None and timer.alive]
