"""Configuration CLI commands."""

from __future__ import annotations

import typer
from rich.console import Console

from doks import _config
from doks._config import DoksConfig, get_config_value, set_config_value

app = typer.Typer(help="Configuration management.")
console = Console()


def _mask(value: str) -> str:
    return value[:8] + "..." + value[-4:] if len(value) > 12 else "***"


@app.command("get")
def get(
    key: str = typer.Argument(..., help="Configuration key"),
) -> None:
    """Get a configuration value.

    Example:
        doks config get api_url
    """
    value = get_config_value(key)

    if value is None:
        console.print(f"[dim]No value set for '{key}'[/dim]")
    else:
        if key == "token" and value:
            value = _mask(value)
        console.print(value)


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Configuration key"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value.

    Example:
        doks config set token dop_v1_...
        doks config set poll_interval 5
    """
    if value.lower() in ("true", "false"):
        typed_value: str | bool | int | float = value.lower() == "true"
    elif value.isdigit():
        typed_value = int(value)
    elif value.replace(".", "", 1).isdigit():
        typed_value = float(value)
    else:
        typed_value = value

    set_config_value(key, typed_value)
    shown = _mask(value) if key == "token" else value
    console.print(f"[green]Set {key} = {shown}[/green]")


@app.command("list")
def list_config() -> None:
    """List all configuration values."""
    config = DoksConfig.load()

    console.print("[bold]Current Configuration[/bold]\n")

    console.print("  token:", end=" ")
    if config.token:
        console.print(_mask(config.token))
    else:
        console.print("[dim]not set[/dim]")

    console.print(f"  api_url: {config.base_url}")
    console.print(f"  timeout: {config.timeout}")
    console.print(f"  max_retries: {config.max_retries}")
    console.print(f"  verify_ssl: {config.verify_ssl}")
    console.print(f"  debug: {config.debug}")
    console.print(f"  poll_interval: {config.poll_interval}")
    console.print(f"  max_polls: {config.max_polls}")

    console.print(f"\n[dim]Config file: {_config.CONFIG_FILE}[/dim]")


@app.command("path")
def show_path() -> None:
    """Show configuration file path."""
    console.print(str(_config.CONFIG_FILE))
