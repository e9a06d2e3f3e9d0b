import asyncio
import threading
from unittest.mock import patch

import pytest

from uplink import cli
from uplink.models import save_config
from uplink.services.config_builder import FieldDescriptor

from conftest import make_channel


class TestParseSelection:
    """Test channel selection parsing."""

    def setup_method(self):
        self.channels = [make_channel(i) for i in range(3)]

    def test_indices(self):
        assert cli.parse_selection("0, 2", self.channels) == [self.channels[0], self.channels[2]]

    def test_all(self):
        assert cli.parse_selection("ALL", self.channels) == self.channels

    def test_empty(self):
        assert cli.parse_selection("  ", self.channels) == []

    def test_duplicates_dropped(self):
        assert cli.parse_selection("1,1", self.channels) == [self.channels[1]]

    @pytest.mark.parametrize("text", ["3", "-1", "x"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            cli.parse_selection(text, self.channels)


class TestPromptFields:
    """Test the terminal prompt engine."""

    @pytest.mark.asyncio
    async def test_defaults_and_retry(self):
        """Test blank answers take defaults and invalid answers are asked again."""
        fields = [
            FieldDescriptor(name="parent", message="Parent:", default="host"),
            FieldDescriptor(name="secret", message="Secret:", validate=lambda v: len(v) != 0),
        ]

        with patch("builtins.input", side_effect=["", "", "sSecret"]):
            answers = await cli.prompt_fields(fields)

        assert answers == {"parent": "host", "secret": "sSecret"}


class TestPromptChannelSelection:
    """Test choosing channels to close."""

    @pytest.mark.asyncio
    async def test_selection(self):
        channels = [make_channel(i) for i in range(3)]

        with patch("builtins.input", return_value="2"):
            assert await cli.prompt_channel_selection(channels) == [channels[2]]

    @pytest.mark.asyncio
    async def test_no_channels_skips_prompt(self):
        with patch("builtins.input") as mock_input:
            assert await cli.prompt_channel_selection([]) == []

        mock_input.assert_not_called()

    @pytest.mark.asyncio
    async def test_event_loop_runs_while_waiting(self):
        """Test other tasks keep running while the user is typing."""
        ticked = threading.Event()

        async def heartbeat():
            await asyncio.sleep(0)
            ticked.set()

        def slow_input(prompt):
            # Only returns if the loop got to run heartbeat meanwhile
            assert ticked.wait(timeout=5)
            return "all"

        channels = [make_channel(0), make_channel(1)]
        with patch("builtins.input", side_effect=slow_input):
            task = asyncio.create_task(heartbeat())
            chosen = await cli.prompt_channel_selection(channels)
            await task

        assert chosen == channels


class TestParser:
    """Test the command surface."""

    def test_commands(self):
        parser = cli.build_parser()

        assert parser.parse_args(["info"]).command == "info"
        assert parser.parse_args(["cleanup"]).command == "cleanup"
        assert parser.parse_args(["topup", "1000"]).amount == "1000"
        args = parser.parse_args(["--config", "x.json", "configure", "--testnet"])
        assert args.testnet is True
        assert args.config == "x.json"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])


class TestMain:
    """Test error handling of the entry point."""

    def test_missing_config(self, tmp_path, capsys):
        """Test a missing config exits with an error message."""
        code = cli.main(["--config", str(tmp_path / "missing.json"), "info"])

        assert code == 1
        assert "run 'configure' first" in capsys.readouterr().err

    def test_configure_refuses_overwrite(self, tmp_path, uplink_config, capsys):
        path = save_config(uplink_config, tmp_path / "uplink.json")

        code = cli.main(["--config", str(path), "configure"])

        assert code == 1
        assert "--force" in capsys.readouterr().err

    def test_topup_invalid_amount(self, tmp_path, uplink_config, capsys):
        path = save_config(uplink_config, tmp_path / "uplink.json")

        code = cli.main(["--config", str(path), "topup", "-5"])

        assert code == 1
        assert "must be positive" in capsys.readouterr().err
