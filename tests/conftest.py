from datetime import datetime

import pytest

from autorestart.config import RestartSettings
from autorestart.messages import Messages
from autorestart.notifier import Notifier
from autorestart.restart import RestartCommand, RestartScheduler

from .fixtures.fake_host import ADMIN_FLAG, FakeClient, FakeHost
from .fixtures.fake_timers import FakeTimers


@pytest.fixture
def clock():
    """Fake clock starting ten seconds before a 03:00:00 restart."""
    return FakeTimers(datetime(2026, 1, 15, 2, 59, 50))


@pytest.fixture
def player():
    return FakeClient("Steve")


@pytest.fixture
def admin():
    return FakeClient("Alex", flags=[ADMIN_FLAG])


@pytest.fixture
def host(player, admin):
    return FakeHost([player, admin])


@pytest.fixture
def notifier(host):
    return Notifier(host, Messages())


@pytest.fixture
def restart_config():
    return RestartSettings(auto_restart_time="03:00:00", flag=ADMIN_FLAG)


@pytest.fixture
def scheduler(restart_config, clock, notifier, host):
    return RestartScheduler(restart_config, clock, notifier, host, now=clock.now)


@pytest.fixture
def restart_command(scheduler):
    return RestartCommand(scheduler)
