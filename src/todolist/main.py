"""Main entry point for the todolist CLI."""

import typer

from todolist import __version__
from todolist.commands import config, tasks
from todolist.utils.ui.console import get_console

app = typer.Typer(
    name="todolist",
    help="A local to-do list backed by SQLite",
    no_args_is_help=True,
)
console = get_console(highlight=False)

# Task commands live at the top level: `todolist add`, `todolist list`, ...
app.command("list")(tasks.list_tasks)
app.command("show")(tasks.show_task)
app.command("add")(tasks.add_task)
app.command("edit")(tasks.edit_task)
app.command("toggle")(tasks.toggle_task)
app.command("delete")(tasks.delete_task)
app.command("search")(tasks.search_tasks)
app.command("count")(tasks.count_tasks)
app.command("clear")(tasks.clear_tasks)

app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(__version__)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
