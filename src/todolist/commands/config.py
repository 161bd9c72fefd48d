"""Configuration management commands."""

from __future__ import annotations

import typer

from todolist.services.config_service import get_config_service
from todolist.utils.ui.console import get_console
from todolist.utils.ui.formatters import format_error, format_json, format_success

app = typer.Typer(help="Configuration management commands")
console = get_console()


@app.command("view")
def view_config() -> None:
    """View current configuration."""
    try:
        config_service = get_config_service()
        format_json(config_service.config.model_dump(mode="json"))
    except RuntimeError as e:
        format_error(str(e))
        raise typer.Exit(1) from e


@app.command("path")
def show_paths() -> None:
    """Show where the configuration and the task store live."""
    config_service = get_config_service()
    console.print(f"config: {config_service.config_path}")
    console.print(f"store:  {config_service.store_path()}")


@app.command("get")
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., api.endpoint)"),
) -> None:
    """Get a configuration value."""
    try:
        value = get_config_service().get(key)
    except KeyError:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(1) from None
    console.print("" if value is None else value)


@app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., api.endpoint)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    parsed_value: str | int | bool = value
    if value.lower() in ("true", "false"):
        parsed_value = value.lower() == "true"
    elif value.isdigit():
        parsed_value = int(value)

    try:
        get_config_service().set(key, parsed_value)
    except KeyError:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(1) from None
    except ValueError as e:
        format_error(str(e))
        raise typer.Exit(1) from e
    format_success(f"Configuration '{key}' set to '{parsed_value}'")


@app.command("reset")
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes and not typer.confirm("Are you sure you want to reset the configuration?"):
        format_error("Cancelled")
        raise typer.Exit(0)

    get_config_service().reset_config()
    format_success("Configuration reset to defaults")
