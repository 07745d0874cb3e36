"""Main CLI entry point."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from doks._config import DoksConfig
from doks._version import __version__
from doks.cli import cluster, config, nodepool
from doks.cli._utils import get_client, get_json_flag, handle_error, output_json, setup_logging
from doks.cluster import ApplyOutcome, KubernetesClusterResource
from doks.exceptions import DoksError
from doks.state import load_spec, load_state, save_state

app = typer.Typer(
    name="doks",
    help="Declare DigitalOcean Kubernetes clusters and keep them that way.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register sub-commands
app.add_typer(cluster.app, name="cluster", help="Cluster management")
app.add_typer(nodepool.app, name="nodepool", help="Node pool commands")
app.add_typer(config.app, name="config", help="Configuration management")

_OUTCOME_STYLE = {
    ApplyOutcome.CREATED: "[green]Created[/green]",
    ApplyOutcome.UPDATED: "[yellow]Updated[/yellow]",
    ApplyOutcome.REPLACED: "[red]Replaced[/red]",
    ApplyOutcome.UNCHANGED: "[dim]Unchanged[/dim]",
}


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"doks version {__version__}")


@app.command()
def apply(
    ctx: typer.Context,
    spec_file: Path = typer.Argument(..., help="TOML file declaring the cluster", exists=True),
    state_file: Path = typer.Option(
        Path("doks-state.json"),
        "--state",
        "-s",
        help="State file to read and update",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Give up waiting for a new cluster after this many seconds",
    ),
) -> None:
    """Create or update a cluster to match its declaration.

    Example:
        doks apply cluster.toml --state doks-state.json
    """
    try:
        desired = load_spec(spec_file)
        state = load_state(state_file)

        with get_client() as client:
            result = KubernetesClusterResource(client).apply(state, desired, timeout=timeout)

        save_state(state_file, result.state)

        if get_json_flag(ctx):
            output_json(
                {
                    "outcome": result.outcome.value,
                    "cluster": result.state.model_dump(mode="json", exclude={"kube_config"}),
                }
            )
            return

        console.print(f"{_OUTCOME_STYLE[result.outcome]} cluster {result.state.name}")
        console.print(f"  ID: {result.state.id}")
        console.print(f"  Status: {result.state.status}")
        console.print(f"  Endpoint: {result.state.endpoint or '-'}")
        console.print(f"\n[dim]State saved to {state_file}[/dim]")

    except (DoksError, OSError, ValueError) as e:
        handle_error(e)


@app.callback()
def main(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output in JSON format",
        is_eager=True,
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Log API calls and polling",
    ),
) -> None:
    """Declare DigitalOcean Kubernetes clusters and keep them that way."""
    ctx.ensure_object(dict)
    ctx.obj["json"] = json_output
    setup_logging(debug or DoksConfig.load().debug)


if __name__ == "__main__":
    app()
