"""Wires lifecycle events and commands to the restart scheduler."""

from datetime import datetime
from typing import Callable, Optional

from .config import Settings
from .events.base import LevelStartedEvent, PlayerChatMessageEvent, PluginLoadedEvent
from .events.dispatcher import EventDispatcher
from .host import ServerHost
from .logger import logger
from .messages import Localizer, Messages, TemplateLocalizer
from .notifier import Notifier
from .restart import RestartCommand, RestartScheduler
from .timers import TimerFactory


class AutoRestartService:
    """
    Schedules the daily restart on load, config reload and every level start,
    and runs the manual restart command from chat or the console.
    """

    def __init__(
        self,
        settings: Settings,
        host: ServerHost,
        timers: TimerFactory,
        event_dispatcher: EventDispatcher,
        now: Callable[[], datetime] = datetime.now,
        localizer: Optional[Localizer] = None,
    ):
        """Initialize the service and register its event handlers.

        Args:
            settings: Application settings
            host: Host providing players, permissions and termination
            timers: Factory for timed callbacks
            event_dispatcher: Dispatcher delivering lifecycle and chat events
            now: Clock returning the current local time
            localizer: Message localizer; defaults to the `messages` table
                from the settings
        """
        self.settings = settings
        self.host = host
        self.event_dispatcher = event_dispatcher
        self._custom_localizer = localizer is not None

        self.messages = Messages(localizer or TemplateLocalizer(settings.messages))
        self.notifier = Notifier(host, self.messages)
        self.scheduler = RestartScheduler(
            settings.restart, timers, self.notifier, host, now=now
        )
        self.restart_command = RestartCommand(self.scheduler)

        event_dispatcher.on_plugin_loaded(self.on_plugin_loaded)
        event_dispatcher.on_level_started(self.on_level_started)
        event_dispatcher.on_player_chat_message(self.on_player_chat_message)

    async def load(self) -> None:
        """Announce a cold start."""
        logger.info("AutoRestart loaded")
        await self.event_dispatcher.dispatch_plugin_loaded(
            PluginLoadedEvent(hot_reload=False)
        )

    async def reload_config(self, settings: Settings) -> None:
        """Swap in new settings and reschedule as a hot reload."""
        self.settings = settings
        self.scheduler.config = settings.restart
        if not self._custom_localizer:
            self.messages.localizer = TemplateLocalizer(settings.messages)

        logger.info("AutoRestart configuration reloaded")
        await self.event_dispatcher.dispatch_plugin_loaded(
            PluginLoadedEvent(hot_reload=True)
        )

    def on_plugin_loaded(self, event: PluginLoadedEvent) -> None:
        if not self.settings.restart.auto_restart_enabled:
            if event.hot_reload and self.scheduler.scheduled is not None:
                logger.info("Automatic restart disabled, cancelling pending restart")
                self.scheduler.clear_scheduled_timers()
            return

        self.scheduler.schedule_auto_restart(
            "plugin hot reload" if event.hot_reload else "plugin load"
        )

    def on_level_started(self, event: LevelStartedEvent) -> None:
        if self.settings.restart.auto_restart_enabled:
            self.scheduler.schedule_auto_restart(f"map start ({event.level_name})")

    def on_player_chat_message(self, event: PlayerChatMessageEvent) -> None:
        if event.message.strip() != self.settings.restart.command:
            return

        invoker = self.host.get_client(event.player_name)
        if invoker is None:
            logger.warning(
                f"Restart command from unknown player {event.player_name}, ignoring"
            )
            return

        self.restart_command(invoker)

    def console_restart(self) -> bool:
        """Run the restart command as the server console."""
        return self.restart_command(None)
