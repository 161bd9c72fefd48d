"""Database schema definitions for the local task store.

The current schema is declared once as :data:`TASK_COLUMNS`; the initial
migration builds the table from it and lightweight inference compares an
existing table against it.
"""

from __future__ import annotations

from dataclasses import dataclass

# Fixed schema identifier; the store file is named after it
MODEL_NAME = "ToDoListModel"
STORE_FILENAME = f"{MODEL_NAME}.sqlite"

TASKS_TABLE = "tasks"


@dataclass(frozen=True)
class Column:
    """A column of the current schema."""

    name: str
    type: str
    constraints: str = ""
    primary_key: bool = False

    @property
    def definition(self) -> str:
        return " ".join(part for part in (self.name, self.type, self.constraints) if part)


# Every task field is optional at the storage layer; the mapper substitutes
# defaults. `pk` is a storage-only row key, `id` is not unique by constraint.
TASK_COLUMNS: tuple[Column, ...] = (
    Column("pk", "INTEGER", "PRIMARY KEY AUTOINCREMENT", primary_key=True),
    Column("id", "TEXT"),
    Column("title", "TEXT"),
    Column("description", "TEXT"),
    Column("is_completed", "BOOLEAN", "NOT NULL DEFAULT 0"),
    Column("created_at", "TEXT"),
    Column("version", "INTEGER", "NOT NULL DEFAULT 1"),
    Column("remote_id", "INTEGER"),
)

# Columns read back into a TaskEntity
ENTITY_COLUMNS: tuple[str, ...] = tuple(
    column.name for column in TASK_COLUMNS if not column.primary_key
)

CREATE_TASKS_TABLE = (
    f"CREATE TABLE IF NOT EXISTS {TASKS_TABLE} (\n    "
    + ",\n    ".join(column.definition for column in TASK_COLUMNS)
    + "\n)"
)

CREATE_TASKS_ID_INDEX = f"CREATE INDEX IF NOT EXISTS idx_tasks_id ON {TASKS_TABLE}(id)"
CREATE_TASKS_CREATED_AT_INDEX = (
    f"CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON {TASKS_TABLE}(created_at DESC)"
)

ALL_INDEXES = [
    CREATE_TASKS_ID_INDEX,
    CREATE_TASKS_CREATED_AT_INDEX,
]
