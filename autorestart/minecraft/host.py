"""Minecraft server as the restart scheduler's host."""

import json
from typing import Dict, Iterable, List, Optional

from ..events.base import PlayerJoinedEvent, PlayerLeftEvent, ServerStoppingEvent
from ..events.dispatcher import EventDispatcher
from ..logger import logger
from .rcon import RconConsole

TICKS_PER_SECOND = 20


def text_component(message: str) -> str:
    return json.dumps({"text": message}, ensure_ascii=False)


class MinecraftPlayer:
    """An online player addressed by name through the console."""

    def __init__(self, name: str, host: "MinecraftHost"):
        self._name = name
        self._host = host

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_valid(self) -> bool:
        return self._host.is_online(self._name)

    def print_to_chat(self, message: str) -> None:
        self._host.console.send(f"tellraw {self._name} {text_component(message)}")

    def print_to_center(self, message: str, duration: int) -> None:
        self._host.send_title(self._name, message, duration)

    def __repr__(self) -> str:
        return f"MinecraftPlayer({self._name!r})"


class MinecraftHost:
    """
    Host backed by a Minecraft server console.

    Online players are tracked from log events and resynced with `list` on
    start. Permission flags come from the configured admin table.
    """

    def __init__(
        self,
        console: RconConsole,
        admins: Optional[Dict[str, List[str]]] = None,
        stop_command: str = "stop",
    ):
        self.console = console
        self.stop_command = stop_command
        self.set_admins(admins or {})
        # lowercased name -> name as last seen
        self._online: Dict[str, str] = {}
        # lowercased name -> title display ticks last sent; kept by the
        # client until it reconnects
        self._title_ticks: Dict[str, int] = {}

    def set_admins(self, admins: Dict[str, List[str]]) -> None:
        # Minecraft player names are case-insensitive
        self._admins = {name.lower(): set(flags) for name, flags in admins.items()}

    def register(self, dispatcher: EventDispatcher) -> None:
        dispatcher.on_player_joined(self.on_player_joined)
        dispatcher.on_player_left(self.on_player_left)
        dispatcher.on_server_stopping(self.on_server_stopping)

    async def sync_players(self) -> None:
        """Replace the tracked player list with the server's own."""
        try:
            players = await self.console.list_players()
        except Exception as e:
            logger.warning(f"Failed to get player list: {e}")
            return
        self._online = {player.lower(): player for player in players}
        logger.info(f"Synced {len(self._online)} online players")

    def is_online(self, name: str) -> bool:
        return name.lower() in self._online

    def get_clients(self) -> Iterable[MinecraftPlayer]:
        return [
            MinecraftPlayer(self._online[key], self) for key in sorted(self._online)
        ]

    def get_client(self, name: str) -> Optional[MinecraftPlayer]:
        if not self.is_online(name):
            return None
        return MinecraftPlayer(self._online[name.lower()], self)

    def has_permission(self, client: MinecraftPlayer, flag: str) -> bool:
        return flag in self._admins.get(client.name.lower(), set())

    def send_title(self, name: str, message: str, duration: int) -> None:
        """Show a title, sending its display time only when it changed."""
        ticks = duration * TICKS_PER_SECOND
        key = name.lower()
        if self._title_ticks.get(key) != ticks:
            self.console.send(f"title {name} times 0 {ticks} 0")
            self._title_ticks[key] = ticks
        self.console.send(f"title {name} title {text_component(message)}")

    def terminate(self) -> None:
        logger.warning(f"Terminating server with '{self.stop_command}'")
        self.console.send(self.stop_command)

    def on_player_joined(self, event: PlayerJoinedEvent) -> None:
        self._online[event.player_name.lower()] = event.player_name
        self._title_ticks.pop(event.player_name.lower(), None)

    def on_player_left(self, event: PlayerLeftEvent) -> None:
        self._online.pop(event.player_name.lower(), None)
        self._title_ticks.pop(event.player_name.lower(), None)

    def on_server_stopping(self, event: ServerStoppingEvent) -> None:
        self._online.clear()
        self._title_ticks.clear()
