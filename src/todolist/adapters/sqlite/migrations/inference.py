"""Lightweight schema inference for an existing task store.

Compares the on-disk ``tasks`` table with :data:`schema.TASK_COLUMNS` and
migrates in place when the difference is limited to added or removed
optional columns. Anything else cannot be inferred and raises
:class:`~todolist.exceptions.StoreLoadError`.
"""

from __future__ import annotations

import sqlite3

from todolist.adapters.sqlite import schema
from todolist.exceptions import StoreLoadError
from todolist.utils.logger import get_logger

logger = get_logger("migrations")


def _table_columns(connection: sqlite3.Connection, table: str) -> dict[str, str]:
    rows = connection.execute(f"PRAGMA table_info({table})").fetchall()
    # (cid, name, type, notnull, dflt_value, pk)
    return {row[1]: (row[2] or "").upper() for row in rows}


def infer_schema_changes(
    connection: sqlite3.Connection,
    columns: tuple[schema.Column, ...] = schema.TASK_COLUMNS,
    table: str = schema.TASKS_TABLE,
) -> list[str]:
    """Plan the DDL needed to bring *table* to the current schema.

    Returns:
        ALTER TABLE statements, empty when the table is current or absent

    Raises:
        StoreLoadError: If the mismatch cannot be resolved automatically
    """
    on_disk = _table_columns(connection, table)
    if not on_disk:
        return []

    expected = {column.name: column for column in columns}
    statements: list[str] = []

    for name, column in expected.items():
        if name not in on_disk:
            if column.primary_key:
                raise StoreLoadError(
                    f"Store table '{table}' has no '{name}' key column; "
                    "cannot migrate automatically"
                )
            statements.append(f"ALTER TABLE {table} ADD COLUMN {column.definition}")
        elif on_disk[name] != column.type:
            raise StoreLoadError(
                f"Column '{table}.{name}' is {on_disk[name] or 'untyped'}, "
                f"expected {column.type}; cannot migrate automatically"
            )

    for name in on_disk:
        if name not in expected:
            statements.append(f"ALTER TABLE {table} DROP COLUMN {name}")

    return statements


def apply_lightweight_migration(connection: sqlite3.Connection) -> list[str]:
    """Infer and apply schema changes in a single transaction.

    Returns:
        The statements that were applied
    """
    statements = infer_schema_changes(connection)
    if not statements:
        return []

    try:
        connection.execute("BEGIN IMMEDIATE")
        for statement in statements:
            connection.execute(statement)
        connection.commit()
    except sqlite3.Error as e:
        connection.rollback()
        raise StoreLoadError(f"Lightweight migration failed: {e}") from e

    for statement in statements:
        logger.info("lightweight migration: %s", statement)
    return statements
