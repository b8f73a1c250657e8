"""Event type definitions."""

from enum import Enum


class EventType(str, Enum):
    """All event types in the system."""

    # Host lifecycle events
    PLUGIN_LOADED = "plugin.loaded"
    LEVEL_STARTED = "level.started"
    SERVER_STOPPING = "server.stopping"

    # Player events from logs
    PLAYER_JOINED = "player.joined"
    PLAYER_LEFT = "player.left"
    PLAYER_CHAT_MESSAGE = "player.chat_message"
