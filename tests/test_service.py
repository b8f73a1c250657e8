"""Tests for wiring lifecycle events to the restart scheduler."""

from datetime import datetime

import pytest

from autorestart.config import RestartSettings, Settings
from autorestart.events.base import LevelStartedEvent, PlayerChatMessageEvent
from autorestart.events.dispatcher import EventDispatcher
from autorestart.service import AutoRestartService

from .fixtures.fake_host import ADMIN_FLAG
from .fixtures.fake_timers import FakeTimers


def make_settings(**restart) -> Settings:
    restart.setdefault("auto_restart_time", "03:00:00")
    restart.setdefault("flag", ADMIN_FLAG)
    return Settings(restart=RestartSettings(**restart), messages={})


@pytest.fixture
def clock():
    return FakeTimers(datetime(2026, 1, 15, 12, 0, 0))


@pytest.fixture
def dispatcher():
    return EventDispatcher()


@pytest.fixture
def service(host, clock, dispatcher):
    return AutoRestartService(make_settings(), host, clock, dispatcher, now=clock.now)


def chat(player, message):
    return PlayerChatMessageEvent(player_name=player.name, message=message)


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_load_schedules_daily_restart(self, service):
        await service.load()

        scheduled = service.scheduler.scheduled
        assert scheduled.target == datetime(2026, 1, 16, 3, 0, 0)
        assert scheduled.reason == "plugin load"

    @pytest.mark.asyncio
    async def test_load_with_auto_restart_disabled(self, host, clock, dispatcher):
        service = AutoRestartService(
            make_settings(auto_restart_enabled=False),
            host,
            clock,
            dispatcher,
            now=clock.now,
        )

        await service.load()

        assert service.scheduler.scheduled is None
        assert clock.timers == []

    @pytest.mark.asyncio
    async def test_level_start_reschedules(self, service, dispatcher, clock):
        await service.load()
        first_restart = service.scheduler.timer_set.restart

        await dispatcher.dispatch(LevelStartedEvent(level_name="de_dust2"))

        assert not first_restart.alive
        assert service.scheduler.scheduled.reason == "map start (de_dust2)"
        assert len([t for t in clock.live() if t.due == first_restart.due]) == 1

    @pytest.mark.asyncio
    async def test_level_start_with_auto_restart_disabled(
        self, host, clock, dispatcher
    ):
        AutoRestartService(
            make_settings(auto_restart_enabled=False),
            host,
            clock,
            dispatcher,
            now=clock.now,
        )

        await dispatcher.dispatch(LevelStartedEvent(level_name="world"))

        assert clock.timers == []

    @pytest.mark.asyncio
    async def test_daily_restart_fires(self, service, clock, host, player):
        await service.load()

        clock.advance(15 * 60 * 60)

        assert host.terminate_calls == 1
        assert player.chat[0] == "Server will restart in 30 seconds."
        assert player.chat[-1] == "Server is restarting now..."


class TestReloadConfig:
    @pytest.mark.asyncio
    async def test_hot_reload_uses_new_time(self, service, clock):
        await service.load()
        old_restart = service.scheduler.timer_set.restart

        await service.reload_config(make_settings(auto_restart_time="18:30:00"))

        assert not old_restart.alive
        scheduled = service.scheduler.scheduled
        assert scheduled.target == datetime(2026, 1, 15, 18, 30, 0)
        assert scheduled.reason == "plugin hot reload"

    @pytest.mark.asyncio
    async def test_disabling_cancels_pending_restart(self, service, clock, host):
        await service.load()

        await service.reload_config(make_settings(auto_restart_enabled=False))

        assert service.scheduler.scheduled is None
        assert clock.live() == []
        clock.advance(24 * 60 * 60)
        assert host.terminate_calls == 0

    @pytest.mark.asyncio
    async def test_invalid_time_on_reload_keeps_schedule(self, service, caplog):
        await service.load()
        scheduled = service.scheduler.scheduled

        await service.reload_config(make_settings(auto_restart_time="later"))

        assert service.scheduler.scheduled == scheduled
        assert "Invalid auto_restart_time format" in caplog.text

    @pytest.mark.asyncio
    async def test_reload_swaps_message_templates(self, service, player):
        settings = make_settings()
        settings.messages = {"restart_warning": "Neustart in {0} Sekunden."}

        await service.reload_config(settings)
        service.notifier.notify_warning(30)

        assert player.chat == ["Neustart in 30 Sekunden."]

    @pytest.mark.asyncio
    async def test_custom_localizer_survives_reload(self, host, clock, dispatcher, player):
        service = AutoRestartService(
            make_settings(),
            host,
            clock,
            dispatcher,
            now=clock.now,
            localizer=lambda client, key, *args: f"custom {key}",
        )

        await service.reload_config(make_settings())
        service.notifier.notify_restarting()

        assert player.chat == ["custom restart_now_chat"]


class TestChatCommand:
    @pytest.mark.asyncio
    async def test_admin_command_schedules_manual_restart(
        self, service, dispatcher, clock, admin
    ):
        await dispatcher.dispatch(chat(admin, "!restartserver"))

        scheduled = service.scheduler.scheduled
        assert scheduled.reason == "manual command"
        assert scheduled.target == datetime(2026, 1, 15, 12, 0, 30)
        assert admin.chat[-1] == (
            "Manual restart scheduled. Server will restart in 30 seconds."
        )

    @pytest.mark.asyncio
    async def test_command_is_trimmed(self, service, dispatcher, admin):
        await dispatcher.dispatch(chat(admin, "  !restartserver "))

        assert service.scheduler.scheduled is not None

    @pytest.mark.asyncio
    async def test_other_chat_is_ignored(self, service, dispatcher, admin):
        await dispatcher.dispatch(chat(admin, "!restartserver now please"))

        assert service.scheduler.scheduled is None

    @pytest.mark.asyncio
    async def test_non_admin_command_is_ignored(self, service, dispatcher, player):
        await dispatcher.dispatch(chat(player, "!restartserver"))

        assert service.scheduler.scheduled is None
        assert player.chat == []

    @pytest.mark.asyncio
    async def test_unknown_player(self, service, dispatcher, caplog):
        await dispatcher.dispatch(
            PlayerChatMessageEvent(player_name="Ghost", message="!restartserver")
        )

        assert service.scheduler.scheduled is None
        assert "Restart command from unknown player Ghost" in caplog.text

    @pytest.mark.asyncio
    async def test_custom_command(self, host, clock, dispatcher, admin):
        service = AutoRestartService(
            make_settings(command="!reboot"), host, clock, dispatcher, now=clock.now
        )

        await dispatcher.dispatch(chat(admin, "!restartserver"))
        assert service.scheduler.scheduled is None

        await dispatcher.dispatch(chat(admin, "!reboot"))
        assert service.scheduler.scheduled is not None


class TestConsoleRestart:
    def test_console_restart(self, service, clock, host):
        assert service.console_restart() is True

        clock.advance(30)
        assert host.terminate_calls == 1

    def test_console_restart_disabled(self, host, clock, dispatcher):
        service = AutoRestartService(
            make_settings(enable_manual_restart=False),
            host,
            clock,
            dispatcher,
            now=clock.now,
        )

        assert service.console_restart() is False
        assert clock.timers == []
