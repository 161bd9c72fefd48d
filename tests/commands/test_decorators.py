"""Tests for command_wrapper."""

from __future__ import annotations

import pytest
import typer

from todolist.commands.decorators import command_wrapper
from todolist.exceptions import InvalidTitleError


def test_runs_sync_function():
    @command_wrapper
    def cmd(x):
        return x * 2

    assert cmd(21) == 42


def test_runs_coroutine_function():
    @command_wrapper
    async def cmd(x):
        return x + 1

    assert cmd(41) == 42


def test_domain_error_exits_with_code_1(capsys):
    @command_wrapper
    async def cmd():
        raise InvalidTitleError()

    with pytest.raises(typer.Exit) as exc_info:
        cmd()

    assert exc_info.value.exit_code == 1
    assert "Task title cannot be empty" in capsys.readouterr().out


def test_unexpected_error_exits_with_code_1(capsys):
    @command_wrapper
    def cmd():
        raise KeyError("surprise")

    with pytest.raises(typer.Exit) as exc_info:
        cmd()

    assert exc_info.value.exit_code == 1
    assert "unexpected error" in capsys.readouterr().out


def test_exit_passes_through():
    @command_wrapper
    def cmd():
        raise typer.Exit(3)

    with pytest.raises(typer.Exit) as exc_info:
        cmd()
    assert exc_info.value.exit_code == 3


def test_preserves_metadata():
    @command_wrapper
    def my_command():
        """Docstring."""

    assert my_command.__name__ == "my_command"
    assert my_command.__doc__ == "Docstring."
