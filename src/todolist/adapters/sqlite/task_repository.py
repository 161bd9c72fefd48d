"""SQLite implementation of TaskRepository."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Sequence
from typing import TypeVar

from todolist.adapters.sqlite.mapper import (
    entity_from_row,
    entity_to_row,
    to_domain,
    to_entity,
    update_entity,
)
from todolist.adapters.sqlite.schema import ENTITY_COLUMNS, TASKS_TABLE
from todolist.adapters.sqlite.stack import PersistenceStack
from todolist.exceptions import (
    ConflictError,
    EntityNotFoundError,
    FetchFailedError,
    SaveFailedError,
)
from todolist.models import Task
from todolist.repositories import TaskRepository
from todolist.utils.logger import get_logger

T = TypeVar("T")

logger = get_logger("repository")

_SELECT = f"SELECT {', '.join(ENTITY_COLUMNS)} FROM {TASKS_TABLE}"
_INSERT = (
    f"INSERT INTO {TASKS_TABLE} ({', '.join(ENTITY_COLUMNS)}) "
    f"VALUES ({', '.join(':' + name for name in ENTITY_COLUMNS)})"
)
_NEWEST_FIRST = "ORDER BY created_at DESC, pk DESC"


def _newest_first(tasks: list[Task]) -> list[Task]:
    # Rows stored without a timestamp get one from the mapper, so re-sort
    # after mapping; the sort is stable and cheap on already-ordered input.
    return sorted(tasks, key=lambda task: task.created_at, reverse=True)


class SqliteTaskRepository(TaskRepository):
    """SQLite implementation of task repository.

    Args:
        stack: Persistence stack providing the read and write contexts.
    """

    def __init__(self, stack: PersistenceStack):
        self.stack = stack

    # ------------------------------------------------------------------
    # Execution helpers
    # ------------------------------------------------------------------

    async def _read(self, work: Callable[[sqlite3.Connection], T]) -> T:
        try:
            return await self.stack.run_read_task(work)
        except sqlite3.Error as e:
            logger.error("fetch failed: %s", e)
            raise FetchFailedError(e) from e

    async def _write(self, work: Callable[[sqlite3.Connection], T]) -> T:
        try:
            return await self.stack.run_write_task(work)
        except sqlite3.Error as e:
            logger.error("save failed: %s", e)
            raise SaveFailedError(e) from e

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch_all(self) -> list[Task]:
        """Return every task, newest first."""

        def work(connection: sqlite3.Connection) -> list[Task]:
            rows = connection.execute(f"{_SELECT} {_NEWEST_FIRST}").fetchall()
            return [to_domain(entity_from_row(row)) for row in rows]

        tasks = _newest_first(await self._read(work))
        logger.debug("fetched %d tasks", len(tasks))
        return tasks

    async def fetch_by_id(self, task_id: str) -> Task | None:
        """Return the task with *task_id*, or None."""

        def work(connection: sqlite3.Connection) -> Task | None:
            row = connection.execute(
                f"{_SELECT} WHERE id = ? LIMIT 1", (task_id,)
            ).fetchone()
            return to_domain(entity_from_row(row)) if row is not None else None

        return await self._read(work)

    async def search(self, text: str) -> list[Task]:
        """Return tasks whose title or description contains *text*, ignoring case."""

        def work(connection: sqlite3.Connection) -> list[Task]:
            rows = connection.execute(
                f"""{_SELECT}
                WHERE contains_casefold(title, :text)
                   OR contains_casefold(description, :text)
                {_NEWEST_FIRST}""",
                {"text": text},
            ).fetchall()
            return [to_domain(entity_from_row(row)) for row in rows]

        tasks = _newest_first(await self._read(work))
        logger.debug("search %r matched %d tasks", text, len(tasks))
        return tasks

    async def count(self) -> int:
        """Return the number of stored tasks."""

        def work(connection: sqlite3.Connection) -> int:
            return connection.execute(f"SELECT COUNT(*) FROM {TASKS_TABLE}").fetchone()[0]

        return await self._read(work)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, task: Task) -> Task:
        """Insert a new entity built from *task*."""

        def work(connection: sqlite3.Connection) -> None:
            connection.execute(_INSERT, entity_to_row(to_entity(task)))

        await self._write(work)
        logger.info("created task %s", task.id)
        return task

    async def update(self, task: Task, *, expected_version: int | None = None) -> Task:
        """Overwrite the mutable fields of the stored task."""

        def work(connection: sqlite3.Connection) -> int:
            row = connection.execute(
                f"{_SELECT} WHERE id = ? LIMIT 1", (task.id,)
            ).fetchone()
            if row is None:
                raise EntityNotFoundError(task.id)

            entity = entity_from_row(row)
            stored_version = entity.version or 1
            if expected_version is not None and stored_version != expected_version:
                raise ConflictError(task.id, expected_version, stored_version)

            entity = update_entity(entity, task).model_copy(
                update={"version": stored_version + 1}
            )
            values = entity_to_row(entity)
            connection.execute(
                f"""UPDATE {TASKS_TABLE}
                SET title = :title, description = :description,
                    is_completed = :is_completed, version = :version
                WHERE id = :id""",
                {
                    "id": task.id,
                    "title": values["title"],
                    "description": values["description"],
                    "is_completed": values["is_completed"],
                    "version": values["version"],
                },
            )
            return values["version"]

        new_version = await self._write(work)
        logger.info("updated task %s (version %d)", task.id, new_version)
        return task.model_copy(update={"version": new_version})

    async def delete(self, task_id: str) -> None:
        """Remove every entity with *task_id*."""

        def work(connection: sqlite3.Connection) -> int:
            return connection.execute(
                f"DELETE FROM {TASKS_TABLE} WHERE id = ?", (task_id,)
            ).rowcount

        removed = await self._write(work)
        logger.info("deleted task %s (%d rows)", task_id, removed)

    async def delete_all(self) -> None:
        """Remove every stored task.

        File-backed stores use one set-based DELETE; in-memory stores remove
        rows one at a time.
        """
        if self.stack.supports_batch_delete:

            def work(connection: sqlite3.Connection) -> int:
                return connection.execute(f"DELETE FROM {TASKS_TABLE}").rowcount

        else:

            def work(connection: sqlite3.Connection) -> int:
                keys = [
                    row[0]
                    for row in connection.execute(f"SELECT pk FROM {TASKS_TABLE}").fetchall()
                ]
                for key in keys:
                    connection.execute(f"DELETE FROM {TASKS_TABLE} WHERE pk = ?", (key,))
                return len(keys)

        removed = await self._write(work)
        logger.info("deleted all tasks (%d rows)", removed)

    async def save_bulk(
        self,
        tasks: Sequence[Task],
        *,
        remote_ids: Sequence[int | None] | None = None,
    ) -> None:
        """Insert every task in one all-or-nothing unit."""
        if remote_ids is None:
            remote_ids = [None] * len(tasks)
        elif len(remote_ids) != len(tasks):
            raise ValueError(
                f"remote_ids has {len(remote_ids)} entries for {len(tasks)} tasks"
            )

        rows = [
            entity_to_row(to_entity(task, remote_id))
            for task, remote_id in zip(tasks, remote_ids)
        ]

        def work(connection: sqlite3.Connection) -> None:
            connection.executemany(_INSERT, rows)

        logger.info("saving %d tasks in bulk", len(rows))
        await self._write(work)
        logger.info("saved %d tasks in bulk", len(rows))
