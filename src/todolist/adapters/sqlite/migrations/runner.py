"""Versioned migrations for the local task store.

Migrations are forward-only and numbered. Each one runs inside its own
``BEGIN IMMEDIATE`` transaction together with its ``schema_version`` row, so
a failure leaves neither a half-built schema nor a version record behind.
Every row also names the model it was written for; a store stamped by a
different model is refused rather than migrated.
"""

from __future__ import annotations

import sqlite3
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import NamedTuple

from todolist.adapters.sqlite.schema import MODEL_NAME
from todolist.adapters.sqlite.utils import format_timestamp, now_utc
from todolist.exceptions import StoreLoadError
from todolist.utils.logger import get_logger

logger = get_logger("migrations")

_CREATE_VERSION_TABLE = """
    CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER PRIMARY KEY,
        model TEXT NOT NULL,
        description TEXT NOT NULL,
        applied_at TEXT NOT NULL
    )
"""


class Migration(ABC):
    """One forward step of the store schema."""

    @property
    @abstractmethod
    def version(self) -> int:
        """Migration version number (sequential)."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of the migration."""

    @abstractmethod
    def up(self, connection: sqlite3.Connection) -> None:
        """Apply the step. Runs inside the runner's transaction; do not commit."""


class AppliedMigration(NamedTuple):
    version: int
    model: str
    description: str
    applied_at: str


class MigrationRunner:
    """Brings one connection's store up to the latest migration.

    Args:
        connection: Connection to migrate; must not be inside a transaction
        model: Model identifier stamped on every applied migration
    """

    def __init__(self, connection: sqlite3.Connection, model: str = MODEL_NAME):
        self.connection = connection
        self.model = model
        self.connection.execute(_CREATE_VERSION_TABLE)
        self._check_model()

    def _check_model(self) -> None:
        rows = self.connection.execute(
            "SELECT DISTINCT model FROM schema_version"
        ).fetchall()
        foreign = sorted(row[0] for row in rows if row[0] != self.model)
        if foreign:
            raise StoreLoadError(
                f"Store was written by model {', '.join(foreign)}, expected {self.model}"
            )

    def get_current_version(self) -> int:
        """Return the highest applied version (0 for a fresh store)."""
        result = self.connection.execute("SELECT MAX(version) FROM schema_version").fetchone()[0]
        return result or 0

    def pending(self, migrations: Iterable[Migration]) -> list[Migration]:
        """Return the migrations newer than the store, oldest first.

        Raises:
            ValueError: If two migrations share a version number
        """
        ordered = sorted(migrations, key=lambda m: m.version)
        versions = [m.version for m in ordered]
        if len(set(versions)) != len(versions):
            raise ValueError(f"Duplicate migration versions in {versions}")

        current = self.get_current_version()
        return [m for m in ordered if m.version > current]

    def apply(self, migration: Migration) -> None:
        """Apply one migration and record it atomically.

        Raises:
            ValueError: If the store is already at or past this version
            StoreLoadError: If the migration fails; nothing is recorded
        """
        current = self.get_current_version()
        if migration.version <= current:
            raise ValueError(
                f"Migration {migration.version} is not newer than store version {current}"
            )

        connection = self.connection
        try:
            connection.execute("BEGIN IMMEDIATE")
            migration.up(connection)
            connection.execute(
                "INSERT INTO schema_version (version, model, description, applied_at) "
                "VALUES (?, ?, ?, ?)",
                (migration.version, self.model, migration.description, format_timestamp(now_utc())),
            )
            connection.commit()
        except sqlite3.Error as e:
            connection.rollback()
            raise StoreLoadError(f"Migration {migration.version} failed: {e}") from e

        logger.info("applied migration %d: %s", migration.version, migration.description)

    def migrate(self, migrations: Iterable[Migration]) -> list[int]:
        """Apply every pending migration.

        Returns:
            Versions applied, in order (empty when the store is current)
        """
        applied = []
        for migration in self.pending(migrations):
            self.apply(migration)
            applied.append(migration.version)
        return applied

    def history(self) -> list[AppliedMigration]:
        rows = self.connection.execute(
            "SELECT version, model, description, applied_at FROM schema_version ORDER BY version"
        ).fetchall()
        return [AppliedMigration(*row) for row in rows]
