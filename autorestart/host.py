"""Collaborators the restart scheduler talks to, provided by the game host."""

from typing import Iterable, Optional, Protocol


class Client(Protocol):
    """A connected player that can receive messages."""

    @property
    def name(self) -> str: ...

    @property
    def is_valid(self) -> bool:
        """False once the player disconnected or is otherwise unreachable."""
        ...

    def print_to_chat(self, message: str) -> None: ...

    def print_to_center(self, message: str, duration: int) -> None:
        """Show a short-lived centered message for `duration` seconds."""
        ...


class ServerHost(Protocol):
    """The host process: its players, their permissions and shutdown."""

    def get_clients(self) -> Iterable[Client]: ...

    def get_client(self, name: str) -> Optional[Client]: ...

    def has_permission(self, client: Client, flag: str) -> bool: ...

    def terminate(self) -> None:
        """Request host shutdown. Fire-and-forget."""
        ...
