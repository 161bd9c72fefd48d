"""Pydantic models for the remote todos API and import bookkeeping."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RemoteTask(BaseModel):
    """A task-like record returned by the remote API."""

    model_config = ConfigDict(populate_by_name=True)

    remote_id: int = Field(alias="id")
    text: str = Field(alias="todo")
    completed: bool
    owner_id: int = Field(alias="userId")


class RemoteTasksResponse(BaseModel):
    """Envelope of ``GET /todos``."""

    todos: list[RemoteTask]
    total: int = 0
    skip: int = 0
    limit: int = 0


class ImportState(str, Enum):
    """Lifecycle of the one-time import."""

    IDLE = "idle"
    FETCHING = "fetching"
    IMPORTING = "importing"
    FALLING_BACK = "falling_back"
    DONE = "done"


class ImportResult(BaseModel):
    """Summary of a completed import run."""

    source: str = "remote"  # "remote" or "fallback"
    fetched: int = 0
    imported: int = 0
    fetch_error: str | None = None
    save_error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.save_error is None
