"""
Event system for AutoRestart.

Turns host lifecycle notifications (load, level start, chat commands) into
handler calls on the event loop.
"""

from .base import BaseEvent
from .dispatcher import EventDispatcher
from .types import EventType

__all__ = [
    "BaseEvent",
    "EventDispatcher",
    "EventType",
]
