"""Remote API client and first-launch import."""

from .client import (
    DecodingError,
    InvalidRequestError,
    NetworkError,
    NoDataError,
    RemoteImportError,
    RemoteTaskClient,
    RemoteTaskClientProtocol,
    ServerError,
)
from .importer import (
    DEMO_COMPLETED_INDEX,
    DEMO_TASK_DESCRIPTIONS,
    RemoteImportService,
    build_demo_tasks,
    tasks_from_remote,
)
from .models import ImportResult, ImportState, RemoteTask, RemoteTasksResponse

__all__ = [
    "DEMO_COMPLETED_INDEX",
    "DEMO_TASK_DESCRIPTIONS",
    "DecodingError",
    "ImportResult",
    "ImportState",
    "InvalidRequestError",
    "NetworkError",
    "NoDataError",
    "RemoteImportError",
    "RemoteImportService",
    "RemoteTask",
    "RemoteTaskClient",
    "RemoteTaskClientProtocol",
    "RemoteTasksResponse",
    "ServerError",
    "build_demo_tasks",
    "tasks_from_remote",
]
