"""Unit tests for main.py, the CLI entry point."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from todolist import __version__
from todolist.main import app, main

runner = CliRunner()


def test_help_lists_commands():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("list", "add", "edit", "toggle", "delete", "search", "count", "clear", "version", "config"):
        assert command in result.output


def test_no_args_shows_help():
    result = runner.invoke(app, [])
    assert "Usage" in result.output


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.output.strip() == __version__


@pytest.mark.parametrize("command", ["add", "edit", "toggle", "delete", "search", "clear"])
def test_subcommand_help(command):
    result = runner.invoke(app, [command, "--help"])
    assert result.exit_code == 0


def test_main_invokes_app(mocker):
    mock_app = mocker.patch("todolist.main.app")
    main()
    mock_app.assert_called_once_with()
