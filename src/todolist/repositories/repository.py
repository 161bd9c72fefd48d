"""Repository abstraction layer.

Defines the task repository interface. Business logic depends on this
contract only, so storage backends (and test doubles) can be swapped
without touching callers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from todolist.models import Task


class TaskRepository(ABC):
    """Abstract base class for task persistence operations.

    All operations are coroutines. Reads resolve against the read context;
    writes resolve after their unit of work has been committed and merged.
    Storage failures surface as ``FetchFailedError`` or ``SaveFailedError``.
    """

    @abstractmethod
    async def fetch_all(self) -> list[Task]:
        """Return every task, newest first.

        Returns:
            Tasks ordered by created_at descending (empty list for an empty store)
        """
        raise NotImplementedError("TaskRepository.fetch_all() must be implemented by adapter")

    @abstractmethod
    async def fetch_by_id(self, task_id: str) -> Task | None:
        """Return the task with *task_id*, or None when it does not exist."""
        raise NotImplementedError("TaskRepository.fetch_by_id() must be implemented by adapter")

    @abstractmethod
    async def create(self, task: Task) -> Task:
        """Insert a new entity built from *task*.

        The caller guarantees that ``task.id`` is unique.

        Returns:
            The same task
        """
        raise NotImplementedError("TaskRepository.create() must be implemented by adapter")

    @abstractmethod
    async def update(self, task: Task, *, expected_version: int | None = None) -> Task:
        """Overwrite title, description and completion of the stored task.

        Args:
            task: Task carrying the new values
            expected_version: When given, the update only applies if the
                stored version still matches

        Returns:
            The task with its new version

        Raises:
            EntityNotFoundError: If no entity has ``task.id``
            ConflictError: If ``expected_version`` does not match
        """
        raise NotImplementedError("TaskRepository.update() must be implemented by adapter")

    @abstractmethod
    async def delete(self, task_id: str) -> None:
        """Remove every entity with *task_id*; a missing id is not an error."""
        raise NotImplementedError("TaskRepository.delete() must be implemented by adapter")

    @abstractmethod
    async def delete_all(self) -> None:
        """Remove every stored task."""
        raise NotImplementedError("TaskRepository.delete_all() must be implemented by adapter")

    @abstractmethod
    async def search(self, text: str) -> list[Task]:
        """Return tasks whose title or description contains *text*.

        Matching is case-insensitive; results are newest first. Empty text is
        not special-cased here.
        """
        raise NotImplementedError("TaskRepository.search() must be implemented by adapter")

    @abstractmethod
    async def count(self) -> int:
        """Return the number of stored tasks."""
        raise NotImplementedError("TaskRepository.count() must be implemented by adapter")

    @abstractmethod
    async def save_bulk(
        self,
        tasks: Sequence[Task],
        *,
        remote_ids: Sequence[int | None] | None = None,
    ) -> None:
        """Insert every task in one all-or-nothing unit.

        Args:
            tasks: Tasks to insert
            remote_ids: Optional origin ids, parallel to *tasks*
        """
        raise NotImplementedError("TaskRepository.save_bulk() must be implemented by adapter")
