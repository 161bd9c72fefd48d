"""Composition root.

Builds the persistence stack and everything that depends on it, and runs the
startup sequence: check the first-launch flag and, on the first launch only,
run the initial import to completion before the app reports ready.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from todolist.adapters.sqlite import PersistenceStack, SqliteTaskRepository
from todolist.events import DATA_DID_LOAD, SHOULD_LOAD_INITIAL_DATA, EventBus
from todolist.models import AppConfig
from todolist.services.launch_state import LaunchState
from todolist.services.remote import (
    ImportResult,
    RemoteImportService,
    RemoteTaskClient,
    RemoteTaskClientProtocol,
)
from todolist.services.task_data_manager import TaskDataManager
from todolist.utils.logger import get_logger

logger = get_logger("app")


class TodoListApp:
    """Owns one persistence stack and the services built on it.

    Args:
        config: Application configuration
        db_path: Store location; overrides ``config.storage.db_path``
        launch_state: First-launch flag storage
        client: Remote API client; defaults to one built from ``config.api``
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        db_path: str | Path | None = None,
        launch_state: LaunchState | None = None,
        client: RemoteTaskClientProtocol | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.events = EventBus()
        self.launch_state = launch_state or LaunchState()

        self.stack = PersistenceStack(db_path or self.config.storage.db_path)
        self.repository = SqliteTaskRepository(self.stack)
        self.data_manager = TaskDataManager(self.repository, self.events)

        if client is None:
            client = RemoteTaskClient(self.config.api.endpoint, timeout=self.config.api.timeout)
        self.importer = RemoteImportService(client, self.repository, self.events)

        self.import_result: ImportResult | None = None
        self._started = False

    async def start(self) -> ImportResult | None:
        """Run the startup sequence once.

        Returns:
            The import result on the first launch, otherwise None
        """
        if self._started:
            return self.import_result
        self._started = True

        if not self.launch_state.check_first_launch():
            logger.info("startup: not first launch, skipping initial import")
            return None

        if not self.config.import_on_first_launch:
            logger.info("startup: initial import disabled by configuration")
            return None

        self.events.publish(SHOULD_LOAD_INITIAL_DATA)
        self.import_result = await self.importer.run()
        return self.import_result

    def on_data_loaded(self, callback) -> Callable[[], None]:
        """Subscribe a list view to ``DATA_DID_LOAD``; returns the unsubscriber."""
        return self.events.subscribe(DATA_DID_LOAD, callback)

    def close(self) -> None:
        self.stack.close()

    async def __aenter__(self) -> TodoListApp:
        try:
            await self.start()
        except BaseException:
            self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
