"""Tests for RCON console command execution."""

from unittest.mock import AsyncMock, patch

import pytest

from autorestart.minecraft.rcon import RconConsole


class TestExecute:
    @pytest.mark.asyncio
    async def test_appends_command_and_strips_ansi(self):
        console = RconConsole(["docker", "exec", "mc", "rcon-cli"])

        with patch(
            "autorestart.minecraft.rcon.exec_command",
            new=AsyncMock(return_value="\x1b[0mStopping the server\x1b[0m\n"),
        ) as mock_exec:
            result = await console.execute("stop")

        mock_exec.assert_awaited_once_with(
            "docker", "exec", "mc", "rcon-cli", "stop", timeout=10.0
        )
        assert result == "Stopping the server"

    def test_empty_command_line(self):
        with pytest.raises(ValueError):
            RconConsole([])


class TestListPlayers:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "output, expected",
        [
            ("There are 2 of a max of 20 players online: Alex, Steve", ["Alex", "Steve"]),
            ("There are 0 of a max of 20 players online: ", []),
            ("There are 1 of a max of 20 players online: Steve\n", ["Steve"]),
            ("Unknown command", []),
        ],
    )
    async def test_parses_list_output(self, output, expected):
        console = RconConsole(["rcon-cli"])

        with patch(
            "autorestart.minecraft.rcon.exec_command",
            new=AsyncMock(return_value=output),
        ):
            assert await console.list_players() == expected


class TestQueue:
    @pytest.mark.asyncio
    async def test_sends_commands_in_order(self):
        console = RconConsole(["rcon-cli"])
        mock_exec = AsyncMock(return_value="")

        with patch("autorestart.minecraft.rcon.exec_command", new=mock_exec):
            await console.start()
            console.send("say one")
            console.send("say two")
            console.send("stop")
            await console.stop()

        assert [call.args[-1] for call in mock_exec.await_args_list] == [
            "say one",
            "say two",
            "stop",
        ]

    @pytest.mark.asyncio
    async def test_failed_command_does_not_stop_worker(self, caplog):
        console = RconConsole(["rcon-cli"])
        mock_exec = AsyncMock(side_effect=[RuntimeError("connection refused"), ""])

        with patch("autorestart.minecraft.rcon.exec_command", new=mock_exec):
            await console.start()
            console.send("say one")
            console.send("say two")
            await console.flush()
            await console.stop()

        assert mock_exec.await_count == 2
        assert "RCON command 'say one' failed: connection refused" in caplog.text

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        await RconConsole(["rcon-cli"]).stop()
