"""Log parser for Minecraft server logs."""

import re
from typing import Optional

from ..config import LogParserSettings
from ..events.base import (
    BaseEvent,
    LevelStartedEvent,
    PlayerChatMessageEvent,
    PlayerJoinedEvent,
    PlayerLeftEvent,
    ServerStoppingEvent,
)
from ..logger import logger


class LogParser:
    """Parses Minecraft server log lines and creates events.

    The level name is announced while the server boots ("Preparing level")
    and remembered until the "Done" line turns it into a level start.
    """

    def __init__(self, config: LogParserSettings):
        self.config = config
        self._level_name = ""

    def parse_line(self, line: str) -> Optional[BaseEvent]:
        """Parse a log line and return an event if matched.

        Args:
            line: Log line to parse

        Returns:
            Parsed event or None if no match
        """
        # Try join pattern
        match = re.search(self.config.join_pattern, line)
        if match and match.group(1):
            logger.info(f"Parsed player join: {match.group(1)}")
            return PlayerJoinedEvent(player_name=match.group(1))

        # Try leave pattern
        match = re.search(self.config.leave_pattern, line)
        if match and match.group(1):
            reason = match.group(2) if len(match.groups()) >= 2 else ""
            logger.info(f"Parsed player leave: {match.group(1)}, reason: {reason}")
            return PlayerLeftEvent(player_name=match.group(1), reason=reason)

        # Try chat pattern
        match = re.search(self.config.chat_pattern, line)
        if match and len(match.groups()) >= 3:
            # Group 1 is [Not Secure] (optional), group 2 is player, group 3 is message
            player_name = match.group(2)
            message = match.group(3)
            if player_name and message:
                logger.debug(f"Parsed chat message: <{player_name}> {message}")
                return PlayerChatMessageEvent(player_name=player_name, message=message)
            logger.warning(f"Failed to extract chat info from line (empty groups): {line}")
            return None

        # Remember the level being prepared
        match = re.search(self.config.level_pattern, line)
        if match:
            self._level_name = match.group(1)
            logger.debug(f"Parsed level name: {self._level_name}")
            return None

        # Try server started pattern
        match = re.search(self.config.server_started_pattern, line)
        if match:
            logger.info(f"Parsed level start: {self._level_name or '<unknown>'}")
            return LevelStartedEvent(level_name=self._level_name)

        # Try server stop pattern
        match = re.search(self.config.server_stop_pattern, line)
        if match:
            logger.info("Parsed server stopping event")
            return ServerStoppingEvent()

        # No match
        return None
