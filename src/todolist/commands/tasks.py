"""Task commands, registered at the top level by ``todolist.main``."""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator

import typer

from todolist.app import TodoListApp
from todolist.exceptions import TaskNotFoundError
from todolist.models import Task
from todolist.services.config_service import get_config_service
from todolist.services.launch_state import LaunchState
from todolist.services.task_data_manager import TaskDataManager
from todolist.utils.ui.console import get_console
from todolist.utils.ui.formatters import (
    format_info,
    format_success,
    format_task,
    format_tasks,
    format_warning,
    short_id,
)

from .decorators import command_wrapper

console = get_console()


def build_app() -> TodoListApp:
    """Build the app from the saved configuration."""
    config_service = get_config_service()
    return TodoListApp(
        config_service.config,
        db_path=config_service.store_path(),
        launch_state=LaunchState(config_service.config_dir),
    )


@contextlib.asynccontextmanager
async def open_app() -> AsyncIterator[TodoListApp]:
    """Start the app (running the first-launch import if due) and close it after."""
    todo_app = build_app()
    async with todo_app:
        if todo_app.import_result is not None:
            result = todo_app.import_result
            if result.source == "fallback":
                format_warning("Could not reach the task API; created demo tasks instead")
            if result.succeeded:
                format_info(f"Imported {result.imported} tasks")
        yield todo_app


async def resolve_task(manager: TaskDataManager, ref: str) -> Task:
    """Find a task by full id, unique id prefix, or list position (``#3``).

    Raises:
        TaskNotFoundError: If nothing or more than one task matches
    """
    if ref.startswith("#") and ref[1:].isdigit():
        return await manager.task_at(int(ref[1:]))

    task = await manager.get_task(ref)
    if task is not None:
        return task

    matches = [t for t in await manager.fetch_all_tasks() if t.id.startswith(ref)]
    if len(matches) != 1:
        raise TaskNotFoundError(ref)
    return matches[0]


@command_wrapper
async def list_tasks(
    json_opt: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List all tasks, newest first."""
    async with open_app() as todo_app:
        tasks = await todo_app.data_manager.fetch_all_tasks()
    format_tasks(tasks, "json" if json_opt else "pretty")


@command_wrapper
async def show_task(
    ref: str = typer.Argument(..., help="Task ID, ID prefix or #index"),
    json_opt: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show one task."""
    async with open_app() as todo_app:
        task = await resolve_task(todo_app.data_manager, ref)
    format_task(task, "json" if json_opt else "pretty")


@command_wrapper
async def add_task(
    title: str = typer.Argument(..., help="Task title"),
    description: str | None = typer.Option(
        None, "--description", "-d", help="Task description"
    ),
) -> None:
    """Create a task."""
    async with open_app() as todo_app:
        task = await todo_app.data_manager.create_task(title, description)
    format_success(f"Created task {short_id(task.id)}: {task.title}")


@command_wrapper
async def edit_task(
    ref: str = typer.Argument(..., help="Task ID, ID prefix or #index"),
    title: str | None = typer.Option(None, "--title", "-t", help="New title"),
    description: str | None = typer.Option(
        None, "--description", "-d", help="New description (empty string clears it)"
    ),
    done: bool | None = typer.Option(None, "--done/--not-done", help="Completion status"),
) -> None:
    """Edit a task's title, description or completion."""
    async with open_app() as todo_app:
        manager = todo_app.data_manager
        task = await resolve_task(manager, ref)
        changes: dict = {}
        if title is not None:
            changes["title"] = title.strip()
        if description is not None:
            changes["description"] = description.strip() or None
        if done is not None:
            changes["is_completed"] = done
        if not changes:
            format_warning("Nothing to update")
            return
        updated = await manager.update_task(task.model_copy(update=changes))
    format_success(f"Updated task {short_id(updated.id)}: {updated.title}")


@command_wrapper
async def toggle_task(
    ref: str = typer.Argument(..., help="Task ID, ID prefix or #index"),
) -> None:
    """Flip a task between done and not done."""
    async with open_app() as todo_app:
        task = await resolve_task(todo_app.data_manager, ref)
        updated = await todo_app.data_manager.toggle_completion(task.id)
    state = "done" if updated.is_completed else "not done"
    format_success(f"Marked {short_id(updated.id)} as {state}")


@command_wrapper
async def delete_task(
    ref: str = typer.Argument(..., help="Task ID, ID prefix or #index"),
) -> None:
    """Delete a task."""
    async with open_app() as todo_app:
        task = await resolve_task(todo_app.data_manager, ref)
        await todo_app.data_manager.delete_task(task.id)
    format_success(f"Deleted task {short_id(task.id)}: {task.title}")


@command_wrapper
async def search_tasks(
    text: str = typer.Argument(..., help="Text to look for in titles and descriptions"),
    json_opt: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Search tasks by title or description (case-insensitive)."""
    async with open_app() as todo_app:
        tasks = await todo_app.data_manager.search_tasks(text)
    format_tasks(tasks, "json" if json_opt else "pretty")


@command_wrapper
async def count_tasks() -> None:
    """Print the number of stored tasks."""
    async with open_app() as todo_app:
        total = await todo_app.data_manager.count_tasks()
    console.print(total)


@command_wrapper
async def clear_tasks(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete every task."""
    if not yes and not typer.confirm("Delete all tasks?"):
        raise typer.Exit(0)
    async with open_app() as todo_app:
        await todo_app.data_manager.delete_all_tasks()
    format_success("Deleted all tasks")
