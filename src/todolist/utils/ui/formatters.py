"""Output formatters for tasks and messages."""

from __future__ import annotations

import json
from typing import Any

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from todolist.models import Task

from .console import get_console

console = get_console()


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {escape(message)}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {escape(message)}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {escape(message)}")


def short_id(task_id: str, length: int = 8) -> str:
    return task_id[:length]


def format_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def task_to_dict(task: Task) -> dict[str, Any]:
    return task.model_dump(mode="json")


def format_tasks(tasks: list[Task], output_format: str = "pretty") -> None:
    """Display a task list, newest first, as a table or JSON."""
    if output_format == "json":
        format_json([task_to_dict(task) for task in tasks])
        return

    if not tasks:
        console.print("[dim]No tasks found[/dim]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="cyan")
    table.add_column("")
    table.add_column("Title")
    table.add_column("Description", style="dim", overflow="fold")
    table.add_column("Created")

    for index, task in enumerate(tasks):
        title = Text(task.title)
        if task.is_completed:
            title.stylize("strike dim")
        table.add_row(
            str(index),
            short_id(task.id),
            "✓" if task.is_completed else "✗",
            title,
            Text(task.description or "-"),
            task.created_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


def format_task(task: Task, output_format: str = "pretty") -> None:
    """Display a single task as key/value pairs or JSON."""
    if output_format == "json":
        format_json(task_to_dict(task))
        return

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")
    for key, value in task_to_dict(task).items():
        formatted_key = key.replace("_", " ").title()
        if isinstance(value, bool):
            formatted_value = "✓" if value else "✗"
        elif value is None:
            formatted_value = "-"
        else:
            formatted_value = str(value)
        table.add_row(formatted_key, Text(formatted_value))
    console.print(table)
