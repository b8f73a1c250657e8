"""RCON console access through an external RCON client (rcon-cli by default)."""

import asyncio
import re
from typing import Optional

from ..logger import logger
from ..utils.exec import exec_command

ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


class RconConsole:
    """
    Sends console commands to the server in order.

    `send` only enqueues, so it can be called from timer callbacks and event
    handlers without awaiting; a single worker task executes the queue.
    """

    def __init__(self, command_line: list[str], timeout: float = 10.0):
        """
        Args:
            command_line: Program and leading arguments; the console command
                is appended as the last argument, e.g. ["rcon-cli"] or
                ["docker", "compose", "exec", "-T", "mc", "rcon-cli"]
            timeout: Seconds a single command may take
        """
        if not command_line:
            raise ValueError("RCON command line must not be empty")
        self.command_line = list(command_line)
        self.timeout = timeout
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._worker())

    async def stop(self) -> None:
        """Send whatever is still queued, then stop the worker."""
        if self._task is None:
            return

        await self.flush()
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def send(self, command: str) -> None:
        """Queue a console command. Fire-and-forget."""
        self._queue.put_nowait(command)

    async def flush(self) -> None:
        """Wait until every queued command has been executed."""
        await self._queue.join()

    async def execute(self, command: str) -> str:
        """Run a console command now and return its cleaned output."""
        program, *args = self.command_line
        result = await exec_command(program, *args, command, timeout=self.timeout)
        return ANSI_ESCAPE_PATTERN.sub("", result).strip()

    async def list_players(self) -> list[str]:
        """
        List online players from the `list` command output, e.g.
        "There are 2 of a max of 20 players online: Alex, Steve".
        """
        players = await self.execute("list")
        if ":" not in players:
            return []
        players_str = players.split(":", 1)[1].strip()
        return [
            player.strip() for player in players_str.split(",") if player.strip() != ""
        ]

    async def _worker(self) -> None:
        while True:
            command = await self._queue.get()
            try:
                await self.execute(command)
                logger.debug(f"RCON command sent: {command}")
            except Exception as e:
                logger.error(f"RCON command {command!r} failed: {e}", exc_info=True)
            finally:
                self._queue.task_done()
