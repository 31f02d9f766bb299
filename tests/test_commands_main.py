"""Tests for top-level CLI main() error/abort handling."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import click
import pytest

from idempiere_cli.cli import commands


class TestCommandsMainAbortHandling:
    """Ensure Ctrl-C style aborts produce friendly output without traceback."""

    def test_main_handles_click_abort_with_friendly_message(
        self,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """click.Abort should return 130 and print a friendly cancellation message."""
        with patch.object(commands.cli, "main", side_effect=click.Abort()):
            result = commands.main(["init", "org.acme.sales"])

        assert result == 130
        assert "Cancelled by user" in capsys.readouterr().out

    def test_main_handles_click_exception(
        self,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """ClickException is shown on stderr and its exit code returned."""
        exc = click.ClickException("boom")
        with patch.object(commands.cli, "main", side_effect=exc):
            result = commands.main(["info"])

        assert result == exc.exit_code
        assert "Error: boom" in capsys.readouterr().err


class TestCommandsMainExitCodes:
    """main() returns the command's exit code instead of exiting."""

    def test_success(self, make_plugin: Callable[..., Path]) -> None:
        assert commands.main(["info", "--dir", str(make_plugin())]) == 0

    def test_state_error(self, tmp_path: Path) -> None:
        assert commands.main(["info", "--dir", str(tmp_path)]) == 3

    def test_missing_argument_is_invalid_input(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert commands.main(["init"]) == 1
        assert "Missing argument" in capsys.readouterr().err

    def test_bad_option_value_is_invalid_input(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        argv = ["init", "org.acme.sales", "--idempiere-version", "abc", "--output-dir", str(tmp_path)]
        assert commands.main(argv) == 1
        assert "Invalid value" in capsys.readouterr().err
        assert not (tmp_path / "org.acme.sales").exists()

    def test_unknown_config_key_is_invalid_input(self) -> None:
        assert commands.main(["config", "set", "defaults.colour", "blue"]) == 1

    def test_unknown_command_is_invalid_input(self) -> None:
        assert commands.main(["deploy"]) == 1

    def test_command_errors_print_to_stdout(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert commands.main(["info", "--dir", str(tmp_path)]) == 3
        captured = capsys.readouterr()
        assert "Not an iDempiere plugin or project" in captured.out
        assert captured.err == ""

    def test_missing_explicit_config_only_warns(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        argv = [
            "init", "org.acme.sales", "--config", str(tmp_path / "absent.yaml"), "--output-dir", str(tmp_path),
        ]
        assert commands.main(argv) == 0
        assert "Config file not found" in capsys.readouterr().out
        assert (tmp_path / "org.acme.sales").is_dir()

    def test_reads_sys_argv(self, make_plugin: Callable[..., Path]) -> None:
        with patch("sys.argv", ["idempiere-cli", "info", "--dir", str(make_plugin())]):
            assert commands.main() == 0
