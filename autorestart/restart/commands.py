"""Manual restart command."""

from datetime import timedelta
from typing import Optional

from ..host import Client
from ..logger import logger
from ..messages import MANUAL_RESTART_DISABLED, MANUAL_RESTART_SCHEDULED
from .scheduler import RestartScheduler
from .types import WARNING_SECONDS

MANUAL_RESTART_REASON = "manual command"


class RestartCommand:
    """
    Permission-gated trigger that restarts the server in 30 seconds.

    The console invoker (None) is always allowed. The restart goes through
    the same path as the automatic one and supersedes it.
    """

    def __init__(self, scheduler: RestartScheduler):
        self.scheduler = scheduler

    @property
    def config(self):
        return self.scheduler.config

    def has_admin_permission(self, invoker: Optional[Client]) -> bool:
        return invoker is None or self.scheduler.host.has_permission(
            invoker, self.config.flag
        )

    def __call__(self, invoker: Optional[Client] = None) -> bool:
        """
        Run the command.

        Args:
            invoker: The player issuing the command, None for the console

        Returns:
            True if a restart was scheduled
        """
        invoker_name = invoker.name if invoker is not None else "console"

        if not self.has_admin_permission(invoker):
            logger.warning(f"{invoker_name} has no admin permission for restart")
            return False

        if not self.config.enable_manual_restart:
            logger.info(f"Manual restart requested by {invoker_name} but it is disabled")
            if invoker is not None and invoker.is_valid:
                self.scheduler.notifier.tell(invoker, MANUAL_RESTART_DISABLED)
            return False

        logger.info(f"{invoker_name} executed the restart command")
        restart_at = self.scheduler.now() + timedelta(seconds=WARNING_SECONDS)
        self.scheduler.schedule_restart_at(restart_at, MANUAL_RESTART_REASON)

        if invoker is not None and invoker.is_valid:
            self.scheduler.notifier.tell(
                invoker, MANUAL_RESTART_SCHEDULED, WARNING_SECONDS
            )
        return True
