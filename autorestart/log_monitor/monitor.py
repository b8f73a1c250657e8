"""Log file monitoring using watchfiles."""

import asyncio
from pathlib import Path
from typing import Optional

import aiofiles
from aiofiles import os as aioos
from watchfiles import Change, awatch

from ..events.dispatcher import EventDispatcher
from ..logger import logger
from .parser import LogParser


class LogMonitor:
    """Tails the server log file and emits parsed events."""

    def __init__(
        self, event_dispatcher: EventDispatcher, log_parser: LogParser, log_path: Path
    ):
        """Initialize log monitor.

        Args:
            event_dispatcher: Event dispatcher for emitting events
            log_parser: Log parser for parsing log lines
            log_path: Path to the log file (typically logs/latest.log)
        """
        self.event_dispatcher = event_dispatcher
        self.log_parser = log_parser
        self.log_path = log_path

        self._file_pointer = 0
        self._task: Optional[asyncio.Task] = None
        self._stop_flag = False

    async def start(self) -> None:
        """Start watching the log file."""
        if self._task is not None:
            logger.warning(f"Already watching {self.log_path}")
            return

        self._stop_flag = False
        self._task = asyncio.create_task(self._watch_loop())
        logger.info(f"Started watching {self.log_path}")

    async def stop(self) -> None:
        """Stop watching the log file."""
        self._stop_flag = True

        if self._task is None:
            return

        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

        logger.info(f"Stopped watching {self.log_path}")

    async def _watch_loop(self) -> None:
        log_path = self.log_path

        # Start from the current end of file, old lines were handled before
        if await aioos.path.exists(log_path):
            self._file_pointer = await aioos.path.getsize(log_path)
            logger.info(f"Log file found, size: {self._file_pointer}")
        else:
            self._file_pointer = 0
            logger.info("Log file not found, will start from beginning when created")

        # wait for the log file to be created
        while not await aioos.path.exists(log_path):
            if self._stop_flag:
                return
            await asyncio.sleep(1)

        try:
            async for changes in awatch(log_path.parent):
                if self._stop_flag:
                    break

                for change_type, changed_path in changes:
                    if Path(changed_path).resolve() != log_path.resolve():
                        continue

                    if change_type == Change.deleted:
                        logger.info("Log file deleted")
                        continue

                    if change_type == Change.added:
                        logger.info("Log file created")
                        self._file_pointer = 0
                    await self.process_log_changes()

        except asyncio.CancelledError:
            logger.debug("Log watch loop cancelled")
            raise
        except Exception as e:
            logger.error(f"Error in log watch loop: {e}", exc_info=True)

    async def process_log_changes(self) -> None:
        """Read lines appended since the last call and dispatch their events."""
        try:
            if not await aioos.path.exists(self.log_path):
                return

            current_size = await aioos.path.getsize(self.log_path)
            last_position = self._file_pointer

            # Check if file was truncated (log rotation)
            if current_size < last_position:
                logger.info("Log file truncated, reading from beginning")
                last_position = 0

            if current_size <= last_position:
                return

            async with aiofiles.open(
                self.log_path, "r", encoding="utf-8", errors="ignore"
            ) as f:
                await f.seek(last_position)
                new_content = await f.read()
                self._file_pointer = await f.tell()

            for line in new_content.splitlines():
                line = line.strip()
                if not line:
                    continue

                event = self.log_parser.parse_line(line)
                if event is not None:
                    await self.event_dispatcher.dispatch(event)

        except Exception as e:
            logger.error(f"Error processing log changes: {e}", exc_info=True)
