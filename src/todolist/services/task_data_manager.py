"""Task data manager - validation and composite task operations.

Sits between the UI layer and the repository. Validation failures are raised
before any repository call, so invalid input never costs storage I/O.
"""

from __future__ import annotations

from todolist.adapters.sqlite.utils import generate_uuid, now_utc
from todolist.events import DATA_DID_LOAD, EventBus
from todolist.exceptions import EntityNotFoundError, InvalidTitleError, TaskNotFoundError
from todolist.models import Task
from todolist.repositories import TaskRepository


class TaskDataManager:
    """Service for task business logic.

    Args:
        repository: TaskRepository implementation for data access
        events: Optional bus; successful mutations publish ``DATA_DID_LOAD``
    """

    def __init__(self, repository: TaskRepository, events: EventBus | None = None):
        self.repository = repository
        self.events = events

    def _changed(self, action: str) -> None:
        if self.events is not None:
            self.events.publish(DATA_DID_LOAD, reason=action)

    async def fetch_all_tasks(self) -> list[Task]:
        """Return every task, newest first."""
        return await self.repository.fetch_all()

    async def get_task(self, task_id: str) -> Task | None:
        return await self.repository.fetch_by_id(task_id)

    async def count_tasks(self) -> int:
        return await self.repository.count()

    async def create_task(self, title: str, description: str | None = None) -> Task:
        """Create a task with a fresh id and the current timestamp.

        Args:
            title: Task title; surrounding whitespace is stripped
            description: Optional description; blank text is stored as None

        Raises:
            InvalidTitleError: If the trimmed title is empty
        """
        title = title.strip()
        if not title:
            raise InvalidTitleError()

        if description is not None:
            description = description.strip() or None

        task = Task(
            id=generate_uuid(),
            title=title,
            description=description,
            is_completed=False,
            created_at=now_utc(),
        )
        created = await self.repository.create(task)
        self._changed("create")
        return created

    async def update_task(self, task: Task) -> Task:
        """Persist the title, description and completion of *task*.

        Raises:
            InvalidTitleError: If the trimmed title is empty
            EntityNotFoundError: If the task is no longer stored
        """
        if not task.title.strip():
            raise InvalidTitleError()

        updated = await self.repository.update(task)
        self._changed("update")
        return updated

    async def delete_task(self, task_id: str) -> None:
        await self.repository.delete(task_id)
        self._changed("delete")

    async def delete_all_tasks(self) -> None:
        await self.repository.delete_all()
        self._changed("delete_all")

    async def search_tasks(self, text: str) -> list[Task]:
        """Search titles and descriptions; blank text lists every task."""
        text = text.strip()
        if not text:
            return await self.repository.fetch_all()
        return await self.repository.search(text)

    async def toggle_completion(self, task_id: str) -> Task:
        """Flip the completion flag of a task.

        The write only applies if nobody changed the task since it was read;
        otherwise ``ConflictError`` is raised and the caller may re-fetch.

        Raises:
            TaskNotFoundError: If no task has *task_id*, or it was deleted
                before the write
            ConflictError: If the task changed between the read and the write
        """
        task = await self.repository.fetch_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)

        try:
            updated = await self.repository.update(
                task.toggled(), expected_version=task.version
            )
        except EntityNotFoundError as e:
            raise TaskNotFoundError(task_id) from e
        self._changed("toggle")
        return updated

    # ------------------------------------------------------------------
    # Index-based helpers for list views
    # ------------------------------------------------------------------

    async def task_at(self, index: int) -> Task:
        """Resolve a position in the newest-first list to a task.

        Raises:
            TaskNotFoundError: If *index* is out of range
        """
        tasks = await self.repository.fetch_all()
        if not 0 <= index < len(tasks):
            raise TaskNotFoundError()
        return tasks[index]

    async def delete_task_at(self, index: int) -> Task:
        task = await self.task_at(index)
        await self.delete_task(task.id)
        return task

    async def toggle_completion_at(self, index: int) -> Task:
        task = await self.task_at(index)
        return await self.toggle_completion(task.id)
