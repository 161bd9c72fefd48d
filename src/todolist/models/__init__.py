"""Domain and configuration models.

Pydantic models shared by the repository, the services and the CLI.
"""

from .config_models import APIConfig, AppConfig, StorageConfig
from .task import Task, TaskEntity

__all__ = [
    "Task",
    "TaskEntity",
    "AppConfig",
    "APIConfig",
    "StorageConfig",
]
