"""Migration 002: index task lookups and the default sort order."""

from __future__ import annotations

import sqlite3

from todolist.adapters.sqlite import schema
from todolist.adapters.sqlite.migrations.runner import Migration


class TaskIndexesMigration(Migration):
    """Add indexes on tasks.id and tasks.created_at."""

    @property
    def version(self) -> int:
        return 2

    @property
    def description(self) -> str:
        return "Index tasks by id and created_at"

    def up(self, connection: sqlite3.Connection) -> None:
        for index_sql in schema.ALL_INDEXES:
            connection.execute(index_sql)


task_indexes_migration = TaskIndexesMigration()
