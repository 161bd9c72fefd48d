"""Task data models."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Task(BaseModel):
    """Task model used by business logic, independent of the storage schema.

    Attributes:
        id: Opaque unique identifier, assigned at creation and never changed
        title: Display text (non-empty is enforced by the data manager)
        description: Optional free text
        is_completed: Completion status
        created_at: Creation timestamp, the default sort key (newest first)
        version: Revision counter used for optimistic concurrency
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str | None = None
    is_completed: bool = False
    created_at: datetime
    version: int = Field(default=1, ge=1)

    @field_validator("created_at")
    @classmethod
    def _normalize_created_at(cls, value: datetime) -> datetime:
        return _ensure_utc(value)

    def toggled(self) -> Task:
        """Return a copy with the completion flag flipped."""
        return self.model_copy(update={"is_completed": not self.is_completed})


class TaskEntity(BaseModel):
    """Persisted task record.

    Every field is optional at the storage layer; the mapper substitutes
    defaults when converting to a :class:`Task`. ``remote_id`` remembers the
    origin record of a first-launch import and is never used for lookups.
    """

    id: str | None = None
    title: str | None = None
    description: str | None = None
    is_completed: bool | None = None
    created_at: datetime | None = None
    version: int | None = None
    remote_id: int | None = None
