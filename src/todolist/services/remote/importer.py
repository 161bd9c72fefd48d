"""RemoteImportService - populates an empty store on first launch.

State machine::

    IDLE -> FETCHING -> IMPORTING    -> DONE
                     -> FALLING_BACK -> DONE

An API failure is compensated with a fixed set of demo tasks instead of
being propagated, so the first launch never ends with an empty list. A
failed bulk save is logged and not retried.
"""

from __future__ import annotations

from todolist.adapters.sqlite.utils import generate_uuid, now_utc
from todolist.events import DATA_DID_LOAD, EventBus
from todolist.exceptions import TaskStoreError
from todolist.models import Task
from todolist.repositories import TaskRepository
from todolist.utils.logger import get_logger

from .client import RemoteImportError, RemoteTaskClientProtocol
from .models import ImportResult, ImportState, RemoteTask

logger = get_logger("import")

DEMO_TASK_DESCRIPTIONS: tuple[str, ...] = (
    "Study the VIPER architecture and apply it to the project",
    "Set up local storage for saving tasks",
    "Implement loading tasks from dummyjson.com",
    "Write tests for the core components",
    "Add search by task title and description",
)
# Zero-based position of the demo task that starts out completed
DEMO_COMPLETED_INDEX = 1


def _numbered_title(index: int) -> str:
    return f"Task {index + 1}"


def build_demo_tasks() -> list[Task]:
    """Return the fixed fallback task set with fresh ids and timestamps."""
    created_at = now_utc()
    return [
        Task(
            id=generate_uuid(),
            title=_numbered_title(index),
            description=description,
            is_completed=index == DEMO_COMPLETED_INDEX,
            created_at=created_at,
        )
        for index, description in enumerate(DEMO_TASK_DESCRIPTIONS)
    ]


def tasks_from_remote(records: list[RemoteTask]) -> list[Task]:
    """Map remote records to new local tasks.

    The remote text becomes the description under a numbered title; ids and
    timestamps are generated locally, the completion flag is kept.
    """
    created_at = now_utc()
    return [
        Task(
            id=generate_uuid(),
            title=_numbered_title(index),
            description=record.text,
            is_completed=record.completed,
            created_at=created_at,
        )
        for index, record in enumerate(records)
    ]


class RemoteImportService:
    """Fetches the initial task set and bulk-saves it into the repository.

    Args:
        client: Remote API client implementing :class:`RemoteTaskClientProtocol`.
        repository: Repository receiving the imported tasks.
        events: Bus on which ``DATA_DID_LOAD`` is published after a successful save.
    """

    def __init__(
        self,
        client: RemoteTaskClientProtocol,
        repository: TaskRepository,
        events: EventBus,
    ) -> None:
        self._client = client
        self._repository = repository
        self._events = events
        self._state = ImportState.IDLE
        self._result: ImportResult | None = None

    @property
    def state(self) -> ImportState:
        return self._state

    @property
    def result(self) -> ImportResult | None:
        return self._result

    def _transition(self, state: ImportState) -> None:
        logger.info("import state: %s -> %s", self._state.value, state.value)
        self._state = state

    async def run(self) -> ImportResult:
        """Run the import once; later calls return the first result."""
        if self._state is not ImportState.IDLE:
            logger.warning("import already %s; not running again", self._state.value)
            return self._result or ImportResult(save_error="import already in progress")

        result = ImportResult()
        self._transition(ImportState.FETCHING)
        remote_ids: list[int | None] | None = None
        try:
            records = await self._client.fetch_tasks()
        except RemoteImportError as e:
            logger.warning("remote fetch failed, using demo tasks: %s", e)
            result.source = "fallback"
            result.fetch_error = str(e)
            self._transition(ImportState.FALLING_BACK)
            tasks = build_demo_tasks()
        else:
            result.fetched = len(records)
            self._transition(ImportState.IMPORTING)
            tasks = tasks_from_remote(records)
            remote_ids = [record.remote_id for record in records]

        try:
            await self._repository.save_bulk(tasks, remote_ids=remote_ids)
        except TaskStoreError as e:
            logger.error("saving imported tasks failed: %s", e)
            result.save_error = str(e)
        else:
            result.imported = len(tasks)
            logger.info("imported %d tasks from %s", len(tasks), result.source)

        self._transition(ImportState.DONE)
        self._result = result
        if result.succeeded:
            self._events.publish(DATA_DID_LOAD, reason="initial_import", count=result.imported)
        return result
