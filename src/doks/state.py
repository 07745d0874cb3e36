"""Local files: declared cluster specs (TOML) and cluster state (JSON).

Example spec file:

    [cluster]
    name = "example"
    region = "lon1"
    version = "1.15.4-do.0"
    tags = ["foo", "bar"]

    [cluster.node_pool]
    name = "default"
    size = "s-1vcpu-2gb"
    node_count = 1
    tags = ["one", "two"]
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from doks.models.cluster import ClusterSpec, ClusterState

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


def load_spec(path: Path) -> ClusterSpec:
    """Load a declared cluster from a TOML file.

    Raises:
        pydantic.ValidationError: If the file does not describe a valid cluster.
    """
    with open(path, "rb") as f:
        data = tomllib.load(f)
    return ClusterSpec.model_validate(data.get("cluster", data))


def load_state(path: Path) -> ClusterState | None:
    """Load the saved state; None when no state was saved yet."""
    if not path.exists():
        return None
    return ClusterState.model_validate_json(path.read_text())


def save_state(path: Path, state: ClusterState | None) -> None:
    """Persist the state, or remove the file once the cluster is gone.

    The file holds cluster credentials and is written with 0o600 permissions.
    """
    if state is None:
        path.unlink(missing_ok=True)
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.unlink(missing_ok=True)
    fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as f:
        f.write(state.model_dump_json(indent=2))
    os.replace(tmp, path)
