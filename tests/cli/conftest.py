"""Shared fixtures for CLI tests.

Commands run in-process through Click's ``CliRunner``, so they exercise the
full chain (option parsing, the command, the engine and the exit code)
without needing the ``idempiere-cli`` entry point on ``$PATH``.
"""

from collections.abc import Callable

import pytest
from click.testing import CliRunner, Result

from idempiere_cli.cli.commands import cli

RunCli = Callable[..., Result]


@pytest.fixture
def run_cli() -> RunCli:
    """Invoke ``idempiere-cli`` with the given arguments."""
    runner = CliRunner()

    def _run(*args: str) -> Result:
        return runner.invoke(cli, list(args), catch_exceptions=False)

    return _run
