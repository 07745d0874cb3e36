"""Cluster CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from doks.cli._utils import (
    confirm_action,
    get_client,
    get_json_flag,
    handle_error,
    output_json,
    output_table,
)
from doks.cluster import KubernetesClusterResource
from doks.exceptions import DoksError
from doks.state import load_state, save_state

app = typer.Typer(help="Cluster management commands.")
console = Console()


@app.command("list")
def list_clusters(ctx: typer.Context) -> None:
    """List clusters."""
    try:
        with get_client() as client:
            clusters = client.clusters.list()

        if get_json_flag(ctx):
            output_json(clusters)
            return

        if not clusters:
            console.print("[dim]No clusters found[/dim]")
            return

        output_table(
            clusters,
            [
                ("id", "ID"),
                ("name", "Name"),
                ("region", "Region"),
                ("version", "Version"),
                ("state", "Status"),
            ],
            title="Kubernetes Clusters",
        )

    except DoksError as e:
        handle_error(e)


@app.command("show")
def show(
    ctx: typer.Context,
    cluster_id: str = typer.Argument(..., help="Cluster ID"),
) -> None:
    """Show the declared view of a cluster."""
    try:
        with get_client() as client:
            state = KubernetesClusterResource(client).import_state(cluster_id)

        if get_json_flag(ctx):
            output_json(state.model_dump(mode="json", exclude={"kube_config"}))
            return

        console.print(f"[bold]Cluster:[/bold] {state.name}")
        console.print(f"  ID: {state.id}")
        console.print(f"  Region: {state.region}")
        console.print(f"  Version: {state.version}")
        console.print(f"  Status: {state.status}")
        console.print(f"  Endpoint: {state.endpoint or '-'}")
        console.print(f"  Tags: {', '.join(state.tags) or '-'}")
        if state.node_pool is None:
            console.print("  Node pool: [yellow]no pool tagged as default[/yellow]")
        else:
            pool = state.node_pool
            console.print(
                f"  Node pool: {pool.name} ({pool.size} x {pool.node_count}) "
                f"tags: {', '.join(pool.tags) or '-'}"
            )

    except DoksError as e:
        handle_error(e)


@app.command("kubeconfig")
def kubeconfig(
    cluster_id: str = typer.Argument(..., help="Cluster ID"),
) -> None:
    """Print a kubeconfig for a cluster."""
    try:
        with get_client() as client:
            state = KubernetesClusterResource(client).import_state(cluster_id)
    except DoksError as e:
        handle_error(e)
        return

    if state.kube_config is not None:
        typer.echo(state.kube_config.raw_config, nl=False)


@app.command("import")
def import_cluster(
    cluster_id: str = typer.Argument(..., help="Cluster ID"),
    state_file: Path = typer.Option(
        Path("doks-state.json"),
        "--state",
        "-s",
        help="State file to write",
    ),
) -> None:
    """Adopt an existing cluster into a state file."""
    try:
        with get_client() as client:
            state = KubernetesClusterResource(client).import_state(cluster_id)
        save_state(state_file, state)
        console.print(f"[green]Imported cluster:[/green] {state.id} -> {state_file}")
    except (DoksError, OSError) as e:
        handle_error(e)


@app.command("delete")
def delete(
    cluster_id: str | None = typer.Argument(None, help="Cluster ID (defaults to the state file)"),
    state_file: Path = typer.Option(
        Path("doks-state.json"),
        "--state",
        "-s",
        help="State file of the cluster",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Skip confirmation",
    ),
) -> None:
    """Delete a cluster."""
    try:
        state = None
        if cluster_id is None:
            state = load_state(state_file)
            if state is None:
                console.print(f"[dim]No cluster recorded in {state_file}[/dim]")
                return
            cluster_id = state.id

        if not force and not confirm_action(f"Delete cluster {cluster_id}?"):
            console.print("Cancelled")
            return

        with get_client() as client:
            KubernetesClusterResource(client).delete(cluster_id)

        if state is not None:
            save_state(state_file, None)
        console.print(f"[green]Deleted cluster:[/green] {cluster_id}")

    except (DoksError, OSError, ValueError) as e:
        handle_error(e)
