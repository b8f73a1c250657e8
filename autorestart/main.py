import asyncio
import signal
from typing import Callable, Optional

from .config import Settings
from .events.dispatcher import EventDispatcher
from .log_monitor import LogMonitor, LogParser
from .logger import logger
from .minecraft import MinecraftHost, RconConsole
from .service import AutoRestartService
from .timers import APSchedulerTimers

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class AutoRestartApp:
    """
    The restart service wired to a Minecraft server.

    SIGHUP reloads the configuration, SIGUSR1 issues the restart command as
    the console, SIGINT/SIGTERM stop the service.
    """

    def __init__(
        self,
        settings: Settings,
        settings_factory: Callable[[], Settings] = Settings,
    ):
        """
        Args:
            settings: Settings to start with
            settings_factory: Loads fresh settings on reload
        """
        self.settings = settings
        self.settings_factory = settings_factory
        self.stop_event = asyncio.Event()

        self.dispatcher = EventDispatcher()
        self.console = RconConsole(
            settings.server.rcon_command, settings.server.rcon_timeout
        )
        self.host = MinecraftHost(
            self.console, settings.admins, settings.server.stop_command
        )
        self.host.register(self.dispatcher)

        self.timers = APSchedulerTimers()
        self.service = AutoRestartService(
            settings, self.host, self.timers, self.dispatcher
        )
        self.log_monitor = LogMonitor(
            self.dispatcher, LogParser(settings.log_parser), settings.server.log_path
        )

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._background_tasks: set[asyncio.Task] = set()

    async def startup(self) -> None:
        logger.info("Starting up...")
        await self.console.start()
        self.timers.start()
        await self.host.sync_players()
        await self.log_monitor.start()
        await self.service.load()
        logger.info("Startup complete.")

    async def shutdown(self) -> None:
        logger.info("Shutting down...")
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
        await self.log_monitor.stop()
        self.timers.shutdown()
        await self.console.stop()
        logger.info("Shutdown complete.")

    async def reload(self) -> None:
        """Load settings again; a broken config keeps the current one."""
        try:
            new_settings = self.settings_factory()
        except Exception as e:
            logger.error(f"Failed to reload configuration: {e}", exc_info=True)
            return

        self.settings = new_settings
        self.host.set_admins(new_settings.admins)
        await self.service.reload_config(new_settings)

    def request_reload(self) -> None:
        task = asyncio.create_task(self.reload())
        # The loop only keeps weak references to tasks
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    def stop(self) -> None:
        self.stop_event.set()

    def install_signal_handlers(self) -> None:
        self._loop = asyncio.get_running_loop()
        for sig in STOP_SIGNALS:
            self._loop.add_signal_handler(sig, self.stop)
        self._loop.add_signal_handler(signal.SIGHUP, self.request_reload)
        self._loop.add_signal_handler(signal.SIGUSR1, self.service.console_restart)

    def remove_signal_handlers(self) -> None:
        if self._loop is None:
            return
        for sig in (*STOP_SIGNALS, signal.SIGHUP, signal.SIGUSR1):
            self._loop.remove_signal_handler(sig)
        self._loop = None

    async def run(self) -> None:
        """Run until a stop signal arrives."""
        self.install_signal_handlers()
        try:
            await self.startup()
            await self.stop_event.wait()
        finally:
            await self.shutdown()
            self.remove_signal_handlers()


async def run(settings: Settings) -> None:
    """Run the restart service against a Minecraft server until interrupted."""
    await AutoRestartApp(settings).run()
