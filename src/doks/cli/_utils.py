"""CLI utilities."""

from __future__ import annotations

import json
import logging
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from doks.client import DoksClient
from doks.exceptions import AuthenticationError, DoksError

console = Console()
error_console = Console(stderr=True)


def get_client() -> DoksClient:
    """Get an authenticated DoksClient from environment and config file."""
    try:
        return DoksClient()
    except AuthenticationError as e:
        error_console.print(f"[red]Authentication error:[/red] {e}")
        error_console.print("\nTo authenticate, run:")
        error_console.print("  doks config set token <token>")
        raise typer.Exit(1) from None


def setup_logging(debug: bool) -> None:
    """Route ``doks`` log records to stderr through rich."""
    logger = logging.getLogger("doks")
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return
    handler = RichHandler(console=error_console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)


def output_json(data: Any) -> None:
    """Output data as JSON."""
    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")
    elif isinstance(data, list) and data and hasattr(data[0], "model_dump"):
        data = [item.model_dump(mode="json") for item in data]

    console.print_json(json.dumps(data, default=str))


def output_table(
    data: list[Any],
    columns: list[tuple[str, str]],
    title: str | None = None,
) -> None:
    """Output data as a Rich table.

    Args:
        data: List of objects
        columns: List of (field_name, header) tuples
        title: Optional table title
    """
    table = Table(title=title, show_header=True, header_style="bold")

    for _, header in columns:
        table.add_column(header)

    for item in data:
        row = []
        for field, _ in columns:
            if hasattr(item, field):
                value = getattr(item, field)
            elif isinstance(item, dict):
                value = item.get(field, "")
            else:
                value = ""

            if value is None:
                value = "-"
            elif isinstance(value, list):
                value = ", ".join(str(v) for v in value) or "-"
            elif hasattr(value, "isoformat"):
                value = value.strftime("%Y-%m-%d %H:%M:%S")

            row.append(str(value))

        table.add_row(*row)

    console.print(table)


def handle_error(e: Exception) -> None:
    """Handle and display an error."""
    if isinstance(e, DoksError):
        error_console.print(f"[red]Error:[/red] {e.message}")
    else:
        error_console.print(f"[red]Error:[/red] {e}")

    raise typer.Exit(1)


def confirm_action(message: str, default: bool = False) -> bool:
    """Prompt user for confirmation."""
    return typer.confirm(message, default=default)


def get_json_flag(ctx: typer.Context) -> bool:
    """Get JSON output flag from context."""
    return ctx.obj.get("json", False) if ctx.obj else False
