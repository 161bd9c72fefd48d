"""Persistence stack for the local task store.

Owns the SQLite store for one process and exposes:

- a read context (connection) that always observes committed writes,
- a background read worker,
- a dedicated write worker whose units of work commit atomically and are
  merged into the read context before their awaiting caller resumes.

The stack is constructed explicitly by the composition root and handed to
whatever needs it; there is no process-wide instance.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import sqlite3
import threading
import uuid
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TypeVar

from platformdirs import user_data_dir

from todolist.adapters.sqlite.migrations import (
    ALL_MIGRATIONS,
    MigrationRunner,
    apply_lightweight_migration,
)
from todolist.adapters.sqlite.schema import MODEL_NAME, STORE_FILENAME
from todolist.adapters.sqlite.utils import contains_casefold
from todolist.exceptions import SaveFailedError, StoreLoadError
from todolist.utils.logger import get_logger

T = TypeVar("T")

IN_MEMORY = ":memory:"

logger = get_logger("stack")


def default_store_path() -> Path:
    """Location of the store in the application's private data directory."""
    return Path(user_data_dir("todolist")) / STORE_FILENAME


class PersistenceStack:
    """Owns the store connections and the background workers.

    Args:
        db_path: Store file path, ``":memory:"`` for a private in-memory
            store, or None for the default location.
    """

    def __init__(self, db_path: str | Path | None = None):
        self._in_memory = str(db_path) == IN_MEMORY
        if self._in_memory:
            self._target = f"file:{MODEL_NAME}-{uuid.uuid4().hex}?mode=memory&cache=shared"
            self.db_path: Path | None = None
        else:
            self.db_path = Path(db_path) if db_path is not None else default_store_path()
            self._target = str(self.db_path)

        # Shared-cache memory stores lock whole tables, so readers must not
        # overlap an open write unit there. WAL file stores need no lock.
        self._store_lock: threading.Lock | None = threading.Lock() if self._in_memory else None

        self._merge_listeners: list[Callable[[int], None]] = []
        self._generation = 0
        self._closed = False

        self._read_connection = self._connect()
        try:
            self._load_store()
            self._write_connection = self._connect()
        except BaseException:
            self._read_connection.close()
            raise

        self._read_executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="todolist-read"
        )
        self._write_executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="todolist-write"
        )
        logger.info("store loaded: %s", self._target)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        is_new_file = False
        if not self._in_memory:
            assert self.db_path is not None
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            is_new_file = not self.db_path.exists()

        try:
            connection = sqlite3.connect(
                self._target,
                uri=self._in_memory,
                check_same_thread=False,  # Used from the worker threads
                timeout=30.0,
            )
        except sqlite3.Error as e:
            raise StoreLoadError(f"Cannot open store {self._target}: {e}") from e

        connection.row_factory = sqlite3.Row
        connection.create_function("contains_casefold", 2, contains_casefold, deterministic=True)
        if not self._in_memory:
            try:
                connection.execute("PRAGMA journal_mode = WAL")
            except sqlite3.Error as e:
                connection.close()
                raise StoreLoadError(f"Cannot open store {self._target}: {e}") from e
            if is_new_file:
                os.chmod(self._target, 0o600)
        return connection

    def _load_store(self) -> None:
        """Bring the on-disk schema up to date or fail startup."""
        try:
            apply_lightweight_migration(self._read_connection)
            MigrationRunner(self._read_connection).migrate(ALL_MIGRATIONS)
        except sqlite3.Error as e:
            raise StoreLoadError(f"Cannot load store {self._target}: {e}") from e

    # ------------------------------------------------------------------
    # Contexts
    # ------------------------------------------------------------------

    @property
    def in_memory(self) -> bool:
        return self._in_memory

    @property
    def supports_batch_delete(self) -> bool:
        """Whether a single set-based DELETE may be used for bulk removal."""
        return not self._in_memory

    @property
    def generation(self) -> int:
        """Number of write units merged into the read context so far."""
        return self._generation

    @property
    def has_changes(self) -> bool:
        """Whether the read context holds uncommitted changes."""
        return self._read_connection.in_transaction

    def get_read_context(self) -> sqlite3.Connection:
        """Return the read context.

        Queries run outside explicit transactions, so each one observes every
        write unit committed before it started.
        """
        self._check_open()
        return self._read_connection

    def add_merge_listener(self, listener: Callable[[int], None]) -> None:
        """Register a callback run after each merge with the new generation.

        Listeners run on the write worker thread.
        """
        self._merge_listeners.append(listener)

    def remove_merge_listener(self, listener: Callable[[int], None]) -> None:
        with contextlib.suppress(ValueError):
            self._merge_listeners.remove(listener)

    # ------------------------------------------------------------------
    # Units of work
    # ------------------------------------------------------------------

    async def run_read_task(self, work: Callable[[sqlite3.Connection], T]) -> T:
        """Run *work* against the read context on the background read worker."""
        self._check_open()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._read_executor, self._run_read_unit, work)

    async def run_write_task(self, work: Callable[[sqlite3.Connection], T]) -> T:
        """Run *work* as one atomic unit on the dedicated write worker.

        The unit commits when *work* returns and rolls back when it raises.
        Cancelling the awaiting task before the worker picks the unit up
        skips it entirely; once started, a unit runs to completion.
        """
        self._check_open()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._write_executor, self._run_write_unit, work)

    def _run_read_unit(self, work: Callable[[sqlite3.Connection], T]) -> T:
        with self._exclusive():
            return work(self._read_connection)

    def _run_write_unit(self, work: Callable[[sqlite3.Connection], T]) -> T:
        connection = self._write_connection
        with self._exclusive():
            connection.execute("BEGIN IMMEDIATE")
            try:
                result = work(connection)
                connection.commit()
            except BaseException:
                connection.rollback()
                raise
        self._merge_changes()
        return result

    def _exclusive(self) -> contextlib.AbstractContextManager:
        if self._store_lock is None:
            return contextlib.nullcontext()
        return self._store_lock

    def _merge_changes(self) -> None:
        self._generation += 1
        logger.debug("merged write unit into read context (generation %d)", self._generation)
        for listener in list(self._merge_listeners):
            try:
                listener(self._generation)
            except Exception:
                logger.exception("merge listener failed")

    # ------------------------------------------------------------------
    # Read-context save
    # ------------------------------------------------------------------

    def save(self) -> None:
        """Commit pending changes on the read context, if there are any.

        Raises:
            SaveFailedError: If the commit fails; pending changes are rolled back
        """
        self._check_open()
        connection = self._read_connection
        if not connection.in_transaction:
            logger.debug("no changes to save")
            return

        with self._exclusive():
            try:
                connection.commit()
            except sqlite3.Error as e:
                connection.rollback()
                logger.error("saving read context failed: %s", e)
                raise SaveFailedError(e) from e
        logger.debug("read context saved")
        self._merge_changes()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Persistence stack is closed")

    def close(self) -> None:
        """Stop the workers and close both connections. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._write_executor.shutdown(wait=True)
        self._read_executor.shutdown(wait=True)
        self._write_connection.close()
        self._read_connection.close()
        logger.info("store closed: %s", self._target)

    async def __aenter__(self) -> PersistenceStack:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
