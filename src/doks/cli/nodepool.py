"""Node pool CLI commands."""

from __future__ import annotations

import typer
from rich.console import Console

from doks.cli._utils import get_client, get_json_flag, handle_error, output_json
from doks.exceptions import DoksError
from doks.node_pool import KubernetesNodePoolResource

app = typer.Typer(help="Node pool commands.")
console = Console()


@app.command("import")
def import_pool(
    ctx: typer.Context,
    import_id: str = typer.Argument(..., help="<cluster_id>,<node_pool_name>"),
) -> None:
    """Look up a node pool by its composite ID."""
    try:
        with get_client() as client:
            pool = KubernetesNodePoolResource(client).import_state(import_id)

        if get_json_flag(ctx):
            output_json(pool)
            return

        console.print(f"[bold]Node pool:[/bold] {pool.name}")
        console.print(f"  ID: {pool.id}")
        console.print(f"  Cluster: {pool.cluster_id}")
        console.print(f"  Size: {pool.size}")
        console.print(f"  Nodes: {pool.node_count}")
        console.print(f"  Tags: {', '.join(pool.tags) or '-'}")

    except DoksError as e:
        handle_error(e)
