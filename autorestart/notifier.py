"""Fan-out of restart notices to every connected player."""

from typing import Callable

from .host import Client, ServerHost
from .logger import log_exception, logger
from .messages import (
    RESTART_COUNTDOWN_CENTER,
    RESTART_COUNTDOWN_CHAT,
    RESTART_NOW_CENTER,
    RESTART_NOW_CHAT,
    RESTART_WARNING,
    Messages,
)

CENTER_MESSAGE_DURATION_SECONDS = 1

ClientAction = Callable[[Client], None]


class Notifier:
    """Sends staged restart notices through the host's clients."""

    def __init__(self, host: ServerHost, messages: Messages):
        """Initialize notifier.

        Args:
            host: Host providing the currently connected clients
            messages: Message resolver (localizer with English fallback)
        """
        self.host = host
        self.messages = messages

    def broadcast_to_all(self, action: ClientAction) -> int:
        """Apply `action` to every currently valid client.

        Clients that went away between scheduling and sending are skipped.
        A failure for one client is logged and does not stop the others.

        Returns:
            Number of clients the action was applied to
        """
        delivered = 0
        for client in list(self.host.get_clients()):
            if client is None or not client.is_valid:
                continue

            self._apply(action, client)
            delivered += 1

        logger.debug(f"Broadcast delivered to {delivered} clients")
        return delivered

    @log_exception("Sending notice to {client}")
    def _apply(self, action: ClientAction, client: Client) -> None:
        action(client)

    def tell(self, client: Client, key: str, *args: object) -> None:
        client.print_to_chat(self.messages.for_client(client, key, *args))

    def notify_warning(self, seconds: int) -> None:
        logger.info(f"Warning players: restart in {seconds} seconds")
        self.broadcast_to_all(lambda client: self.tell(client, RESTART_WARNING, seconds))

    def notify_countdown(self, seconds: int) -> None:
        def send(client: Client) -> None:
            self.tell(client, RESTART_COUNTDOWN_CHAT, seconds)
            client.print_to_center(
                self.messages.for_client(client, RESTART_COUNTDOWN_CENTER, seconds),
                CENTER_MESSAGE_DURATION_SECONDS,
            )

        self.broadcast_to_all(send)

    def notify_restarting(self) -> None:
        def send(client: Client) -> None:
            self.tell(client, RESTART_NOW_CHAT)
            client.print_to_center(
                self.messages.for_client(client, RESTART_NOW_CENTER),
                CENTER_MESSAGE_DURATION_SECONDS,
            )

        self.broadcast_to_all(send)
