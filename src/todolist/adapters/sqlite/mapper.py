"""Conversion between stored task entities and domain tasks.

This is the one place where absent storage values are replaced by safe
defaults, so a schema that later makes those fields mandatory only needs to
change here.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Any

from todolist.adapters.sqlite.schema import ENTITY_COLUMNS
from todolist.adapters.sqlite.utils import (
    format_timestamp,
    generate_uuid,
    now_utc,
    parse_timestamp,
)
from todolist.models import Task, TaskEntity
from todolist.utils.logger import get_logger

logger = get_logger("mapper")


def to_domain(entity: TaskEntity) -> Task:
    """Convert a stored entity into a domain task, filling absent fields."""
    return Task(
        id=entity.id or generate_uuid(),
        title=entity.title if entity.title is not None else "",
        description=entity.description,
        is_completed=bool(entity.is_completed),
        created_at=entity.created_at or now_utc(),
        version=entity.version or 1,
    )


def to_entity(task: Task, remote_id: int | None = None) -> TaskEntity:
    """Build a new entity from a domain task."""
    return TaskEntity(
        id=task.id,
        title=task.title,
        description=task.description,
        is_completed=task.is_completed,
        created_at=task.created_at,
        version=task.version,
        remote_id=remote_id,
    )


def update_entity(entity: TaskEntity, task: Task) -> TaskEntity:
    """Return a copy of *entity* with the task's mutable fields applied."""
    return entity.model_copy(
        update={
            "title": task.title,
            "description": task.description,
            "is_completed": task.is_completed,
        }
    )


def entity_from_row(row: sqlite3.Row | dict[str, Any]) -> TaskEntity:
    """Read a TaskEntity out of a query row.

    Columns missing from the row are treated as absent values.
    """
    data = dict(row)
    is_completed = data.get("is_completed")
    return TaskEntity(
        id=data.get("id"),
        title=data.get("title"),
        description=data.get("description"),
        is_completed=None if is_completed is None else bool(is_completed),
        created_at=_stored_timestamp(data),
        version=data.get("version"),
        remote_id=data.get("remote_id"),
    )


def _stored_timestamp(data: dict[str, Any]) -> datetime | None:
    """Parse the stored created_at; an unreadable value counts as absent."""
    raw = data.get("created_at")
    if raw is not None and not isinstance(raw, str):
        raw = str(raw)
    try:
        return parse_timestamp(raw)
    except ValueError:
        logger.warning("unreadable created_at %r on task %s", raw, data.get("id"))
        return None


def entity_to_row(entity: TaskEntity) -> dict[str, Any]:
    """Serialize a TaskEntity into named SQL parameters."""
    row: dict[str, Any] = {name: getattr(entity, name) for name in ENTITY_COLUMNS}
    row["is_completed"] = int(bool(entity.is_completed))
    row["version"] = entity.version or 1
    row["created_at"] = (
        format_timestamp(entity.created_at) if entity.created_at is not None else None
    )
    return row
