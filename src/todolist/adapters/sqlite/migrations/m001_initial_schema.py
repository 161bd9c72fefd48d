"""Migration 001: create the tasks table."""

import sqlite3

from todolist.adapters.sqlite import schema

from .runner import Migration


class InitialSchemaMigration(Migration):
    """Create the tasks table from the current column declarations."""

    @property
    def version(self) -> int:
        return 1

    @property
    def description(self) -> str:
        return "Initial task store schema"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute(schema.CREATE_TASKS_TABLE)


initial_migration = InitialSchemaMigration()
