"""Exception hierarchy for the to-do list core.

Storage failures wrap the underlying error so callers can decide whether to
retry; validation failures are raised before any storage work happens.
"""

from __future__ import annotations


class TodoListError(Exception):
    """Base exception for all to-do list errors."""


class TaskStoreError(TodoListError):
    """Base exception for persistence-layer failures."""


class SaveFailedError(TaskStoreError):
    """Raised when a write unit or a read-context save cannot be committed."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Failed to save data: {cause}")
        self.cause = cause


class FetchFailedError(TaskStoreError):
    """Raised when a query against the store fails."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Failed to load data: {cause}")
        self.cause = cause


class EntityNotFoundError(TaskStoreError):
    """Raised when an update targets an id that has no stored entity."""

    def __init__(self, task_id: str):
        super().__init__(f"Entity not found: {task_id}")
        self.task_id = task_id


class ConflictError(TaskStoreError):
    """Raised when the stored version no longer matches the expected one."""

    def __init__(self, task_id: str, expected: int, actual: int):
        super().__init__(
            f"Task {task_id} was modified concurrently "
            f"(expected version {expected}, found {actual})"
        )
        self.task_id = task_id
        self.expected = expected
        self.actual = actual


class StoreLoadError(TaskStoreError):
    """Raised when the on-disk store cannot be opened or migrated.

    This is a fatal startup condition; nothing inside the core catches it.
    """


class TaskValidationError(TodoListError):
    """Base exception for domain validation failures."""


class InvalidTitleError(TaskValidationError):
    """Raised when a task title is empty after trimming."""

    def __init__(self):
        super().__init__("Task title cannot be empty")


class TaskNotFoundError(TaskValidationError):
    """Raised when a task required by a composite operation does not exist."""

    def __init__(self, task_id: str | None = None):
        message = "Task not found" if task_id is None else f"Task not found: {task_id}"
        super().__init__(message)
        self.task_id = task_id
