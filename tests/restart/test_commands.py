"""
Test the manual restart command.
"""

from datetime import datetime, timedelta

from autorestart.restart.commands import MANUAL_RESTART_REASON

from ..fixtures.fake_host import FakeClient


class TestPermissions:
    def test_unauthorized_player_gets_nothing(
        self, restart_command, scheduler, clock, player, caplog
    ):
        clock.current = datetime(2026, 1, 15, 12, 0, 0)

        assert restart_command(player) is False

        assert player.chat == []
        assert clock.timers == []
        assert scheduler.scheduled is None
        assert "Steve has no admin permission" in caplog.text

    def test_console_is_always_authorized(self, restart_command, scheduler, clock):
        clock.current = datetime(2026, 1, 15, 12, 0, 0)

        assert restart_command(None) is True

        assert scheduler.scheduled.target == datetime(2026, 1, 15, 12, 0, 30)
        assert scheduler.scheduled.reason == MANUAL_RESTART_REASON

    def test_admin_flag_comes_from_config(self, restart_command, restart_config, admin):
        restart_config.flag = "@css/other"

        assert restart_command.has_admin_permission(admin) is False
        assert restart_command.has_admin_permission(None) is True


class TestManualRestart:
    def test_admin_schedules_restart_in_thirty_seconds(
        self, restart_command, scheduler, clock, host, admin, player
    ):
        clock.current = datetime(2026, 1, 15, 12, 0, 0)

        assert restart_command(admin) is True

        assert admin.chat == [
            "Server will restart in 30 seconds.",
            "Manual restart scheduled. Server will restart in 30 seconds.",
        ]
        # Everyone else only gets the broadcast warning
        assert player.chat == ["Server will restart in 30 seconds."]

        clock.advance(29)
        assert host.terminate_calls == 0

        clock.advance(1)
        assert host.terminate_calls == 1

    def test_manual_restart_supersedes_daily_restart(
        self, restart_command, scheduler, restart_config, clock, host, admin
    ):
        restart_config.auto_restart_time = "12:00:00"
        clock.current = datetime(2026, 1, 15, 11, 0, 0)
        scheduler.schedule_auto_restart("plugin load")
        daily_restart = scheduler.timer_set.restart

        restart_command(admin)

        assert not daily_restart.alive
        assert scheduler.scheduled.target == datetime(2026, 1, 15, 11, 0, 30)

        clock.advance(60 * 60 * 2)
        assert host.terminate_calls == 1

    def test_repeated_command_rearms(self, restart_command, scheduler, clock, host, admin):
        restart_command(admin)
        clock.advance(20)
        restart_command(admin)

        clock.advance(29)
        assert host.terminate_calls == 0

        clock.advance(1)
        assert host.terminate_calls == 1
        assert clock.live() == []

    def test_disabled_manual_restart_tells_invoker(
        self, restart_command, restart_config, scheduler, clock, admin, player
    ):
        restart_config.enable_manual_restart = False

        assert restart_command(admin) is False

        assert admin.chat == ["Manual restart is disabled."]
        assert player.chat == []
        assert clock.timers == []

    def test_disabled_manual_restart_from_console(
        self, restart_command, restart_config, clock, caplog
    ):
        restart_config.enable_manual_restart = False

        assert restart_command(None) is False

        assert clock.timers == []
        assert "disabled" in caplog.text

    def test_invalid_invoker_gets_no_acknowledgement(
        self, restart_command, scheduler, host, clock
    ):
        ghost = FakeClient("Herobrine", valid=False, flags=["@css/root"])

        assert restart_command(ghost) is True

        assert ghost.chat == []
        assert scheduler.scheduled.target == clock.now() + timedelta(seconds=30)
