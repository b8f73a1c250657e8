"""
Log monitoring for AutoRestart.

Tails the Minecraft server log and emits lifecycle and player events.
"""

from .monitor import LogMonitor
from .parser import LogParser

__all__ = [
    "LogMonitor",
    "LogParser",
]
