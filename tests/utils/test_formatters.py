"""Tests for task and message formatting."""

from datetime import UTC, datetime

from todolist.models import Task
from todolist.utils.ui.formatters import format_success, format_task, format_tasks


def _task(**overrides) -> Task:
    data = {
        "id": "task-1",
        "title": "Read [b]docs[/b]",
        "description": "see [/b] tag",
        "created_at": datetime(2024, 1, 1, tzinfo=UTC),
    }
    data.update(overrides)
    return Task(**data)


def test_table_prints_brackets_literally(capsys):
    format_tasks([_task()])
    out = capsys.readouterr().out
    assert "[/b]" in out
    assert "[b]docs[/b]" in out


def test_single_task_prints_brackets_literally(capsys):
    format_task(_task())
    assert "see [/b] tag" in capsys.readouterr().out


def test_messages_are_not_markup(capsys):
    format_success("Created task task-1: [red]x[/] and [/b]")
    assert "[red]x[/] and [/b]" in capsys.readouterr().out
