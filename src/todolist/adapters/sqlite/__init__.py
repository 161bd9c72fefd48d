"""SQLite adapter module - local task store implementation."""

from todolist.adapters.sqlite.stack import PersistenceStack, default_store_path
from todolist.adapters.sqlite.task_repository import SqliteTaskRepository

__all__ = [
    "PersistenceStack",
    "SqliteTaskRepository",
    "default_store_path",
]
