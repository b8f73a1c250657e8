"""Event dispatcher - dispatches typed events to registered handlers.

This is a simple event system without persistence.
Each event type has its own handler function with proper typing.
"""

import asyncio
import inspect
from typing import Awaitable, Callable, Dict, List, TypeVar, Union

from ..logger import logger
from .base import (
    BaseEvent,
    LevelStartedEvent,
    PlayerChatMessageEvent,
    PlayerJoinedEvent,
    PlayerLeftEvent,
    PluginLoadedEvent,
    ServerStoppingEvent,
)
from .types import EventType

# Generic type variable for event types
EventT = TypeVar("EventT", bound=BaseEvent)

# Generic handler type that can be sync or async for any event type
EventHandler = Union[Callable[[EventT], None], Callable[[EventT], Awaitable[None]]]


class EventDispatcher:
    """Dispatches events to registered handlers.

    Sync handlers run inline on the event loop, in registration order, so
    they never run concurrently with timer callbacks. Async handlers run as
    tasks and are awaited together.
    """

    def __init__(self):
        """Initialize event dispatcher."""
        # Each event type maps to a list of handler functions
        self._handlers: Dict[EventType, List[Callable]] = {
            event_type: [] for event_type in EventType
        }

    # Registration methods - one per event type for type safety

    def on_plugin_loaded(self, handler: EventHandler[PluginLoadedEvent]) -> None:
        """Register handler for plugin loaded events."""
        self._handlers[EventType.PLUGIN_LOADED].append(handler)

    def on_level_started(self, handler: EventHandler[LevelStartedEvent]) -> None:
        """Register handler for level started events."""
        self._handlers[EventType.LEVEL_STARTED].append(handler)

    def on_server_stopping(self, handler: EventHandler[ServerStoppingEvent]) -> None:
        """Register handler for server stopping events."""
        self._handlers[EventType.SERVER_STOPPING].append(handler)

    def on_player_joined(self, handler: EventHandler[PlayerJoinedEvent]) -> None:
        """Register handler for player joined events."""
        self._handlers[EventType.PLAYER_JOINED].append(handler)

    def on_player_left(self, handler: EventHandler[PlayerLeftEvent]) -> None:
        """Register handler for player left events."""
        self._handlers[EventType.PLAYER_LEFT].append(handler)

    def on_player_chat_message(
        self, handler: EventHandler[PlayerChatMessageEvent]
    ) -> None:
        """Register handler for player chat message events."""
        self._handlers[EventType.PLAYER_CHAT_MESSAGE].append(handler)

    # Dispatch methods - one per event type for type safety

    async def dispatch_plugin_loaded(self, event: PluginLoadedEvent) -> None:
        """Dispatch plugin loaded event."""
        await self.dispatch(event)

    async def dispatch_level_started(self, event: LevelStartedEvent) -> None:
        """Dispatch level started event."""
        await self.dispatch(event)

    async def dispatch_server_stopping(self, event: ServerStoppingEvent) -> None:
        """Dispatch server stopping event."""
        await self.dispatch(event)

    async def dispatch_player_joined(self, event: PlayerJoinedEvent) -> None:
        """Dispatch player joined event."""
        await self.dispatch(event)

    async def dispatch_player_left(self, event: PlayerLeftEvent) -> None:
        """Dispatch player left event."""
        await self.dispatch(event)

    async def dispatch_player_chat_message(self, event: PlayerChatMessageEvent) -> None:
        """Dispatch player chat message event."""
        await self.dispatch(event)

    async def dispatch(self, event: BaseEvent) -> None:
        """Dispatch event to all registered handlers.

        Handler failures are logged and do not affect other handlers.

        Args:
            event: Event to dispatch
        """
        handlers = self._handlers.get(event.event_type, [])

        if not handlers:
            logger.debug(f"No handlers registered for event: {event.event_type}")
            return

        tasks = []
        task_handlers = []
        for handler in handlers:
            if inspect.iscoroutinefunction(handler):
                tasks.append(asyncio.create_task(handler(event)))
                task_handlers.append(handler)
                continue

            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Handler {handler.__name__} failed for event {event.event_type}: {e}",
                    exc_info=True,
                )

        # Wait for async handlers to complete
        if tasks:
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for handler, result in zip(task_handlers, results):
                if isinstance(result, Exception):
                    logger.error(
                        f"Handler {handler.__name__} failed for event {event.event_type}: {result}",
                        exc_info=result,
                    )
