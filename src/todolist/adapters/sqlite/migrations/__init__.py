"""Schema migrations for the local task store."""

from .inference import apply_lightweight_migration, infer_schema_changes
from .m001_initial_schema import initial_migration
from .m002_task_indexes import task_indexes_migration
from .runner import AppliedMigration, Migration, MigrationRunner

ALL_MIGRATIONS: list[Migration] = [
    initial_migration,
    task_indexes_migration,
]

__all__ = [
    "ALL_MIGRATIONS",
    "AppliedMigration",
    "Migration",
    "MigrationRunner",
    "apply_lightweight_migration",
    "infer_schema_changes",
]
