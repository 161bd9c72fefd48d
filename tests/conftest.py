"""Shared test fixtures and configuration.

Provides real persistence stacks (in-memory and temp-file SQLite) and keeps
config and launch-state files inside *tmp_path*.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest

from todolist.adapters.sqlite import PersistenceStack, SqliteTaskRepository
from todolist.models import Task
from todolist.services.launch_state import LaunchState
from todolist.services.remote import RemoteTask

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


def make_task(
    task_id: str = "task-1",
    title: str = "Test task",
    description: str | None = None,
    is_completed: bool = False,
    minutes: int = 0,
) -> Task:
    """Build a task created *minutes* after BASE_TIME."""
    return Task(
        id=task_id,
        title=title,
        description=description,
        is_completed=is_completed,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


class FakeRemoteClient:
    """Stand-in for RemoteTaskClient returning canned records or raising."""

    def __init__(self, records: list[RemoteTask] | None = None, error: Exception | None = None):
        self.records = records or []
        self.error = error
        self.calls = 0

    async def fetch_tasks(self) -> list[RemoteTask]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.records)


# ---------------------------------------------------------------------------
# Persistence fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def memory_stack():
    """Provide a private in-memory persistence stack."""
    stack = PersistenceStack(":memory:")
    yield stack
    stack.close()


@pytest.fixture()
def file_stack(tmp_path):
    """Provide a persistence stack backed by a temp file."""
    stack = PersistenceStack(tmp_path / "ToDoListModel.sqlite")
    yield stack
    stack.close()


@pytest.fixture(params=["memory", "file"])
def stack(request, tmp_path):
    """Run the test against both store kinds."""
    if request.param == "memory":
        s = PersistenceStack(":memory:")
    else:
        s = PersistenceStack(tmp_path / "ToDoListModel.sqlite")
    yield s
    s.close()


@pytest.fixture()
def repo(stack):
    """Provide a SqliteTaskRepository over the parametrized stack."""
    return SqliteTaskRepository(stack)


# ---------------------------------------------------------------------------
# Config isolation helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def launch_state(tmp_path):
    """Launch-state flags stored under tmp_path."""
    return LaunchState(tmp_path / "state")


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from todolist.services.config_service import ConfigService, get_config_service

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("todolist.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("todolist.services.config_service.user_data_dir", return_value=tmpdir):
            yield ConfigService()
    get_config_service.cache_clear()
