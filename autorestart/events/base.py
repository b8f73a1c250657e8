"""Base event model for all events."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from .types import EventType


class BaseEvent(BaseModel):
    """Base class for all events."""

    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# Host lifecycle events
class PluginLoadedEvent(BaseEvent):
    """Fired when the restart service is loaded or its config is reloaded."""

    event_type: EventType = EventType.PLUGIN_LOADED
    hot_reload: bool = Field(
        default=False, description="Config reload rather than a cold start"
    )


class LevelStartedEvent(BaseEvent):
    """Fired when the server finished loading its level."""

    event_type: EventType = EventType.LEVEL_STARTED
    level_name: str = Field(default="", description="Level (world) name")


class ServerStoppingEvent(BaseEvent):
    """Fired when server shutdown is detected in logs."""

    event_type: EventType = EventType.SERVER_STOPPING


# Player events from logs
class PlayerJoinedEvent(BaseEvent):
    """Fired when player joins server."""

    event_type: EventType = EventType.PLAYER_JOINED
    player_name: str = Field(..., description="Player username")


class PlayerLeftEvent(BaseEvent):
    """Fired when player leaves server."""

    event_type: EventType = EventType.PLAYER_LEFT
    player_name: str = Field(..., description="Player username")
    reason: str = Field(default="", description="Disconnect reason")


class PlayerChatMessageEvent(BaseEvent):
    """Fired when player sends chat message."""

    event_type: EventType = EventType.PLAYER_CHAT_MESSAGE
    player_name: str = Field(..., description="Player username")
    message: str = Field(..., description="Chat message content")
