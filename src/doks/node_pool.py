"""Node pools addressed through their parent cluster.

A node pool has no globally unique handle a user could type, so it is
imported with the composite identifier ``<cluster_id>,<node_pool_name>``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from doks.cluster import IMPORT_GUIDANCE
from doks.exceptions import DoksError, NotFoundError
from doks.models.cluster import ClusterNodePoolState, NodePool
from doks.translate import flatten_node_pool

if TYPE_CHECKING:
    from doks.client import DoksClient

logger = logging.getLogger("doks.node_pool")


def parse_import_id(import_id: str) -> tuple[str, str]:
    """Split ``<cluster_id>,<node_pool_name>``.

    Raises:
        NotFoundError: The identifier does not have two non-empty parts.
    """
    parts = [p.strip() for p in import_id.split(",")]
    if len(parts) != 2 or not all(parts):
        raise NotFoundError(
            f"Invalid node pool import ID {import_id!r}, expected "
            f"'<cluster_id>,<node_pool_name>'. {IMPORT_GUIDANCE}.",
            resource_type="kubernetes_node_pool",
            resource_id=import_id,
        )
    return parts[0], parts[1]


class KubernetesNodePoolResource:
    """Read and import node pools of an existing cluster."""

    def __init__(self, client: DoksClient) -> None:
        self._node_pools = client.node_pools

    def read(self, cluster_id: str, pool_id: str) -> ClusterNodePoolState | None:
        """Refresh a node pool; None if it or its cluster is gone."""
        try:
            pool = self._node_pools.get(cluster_id, pool_id)
        except NotFoundError:
            logger.debug("Node pool %s of cluster %s is gone", pool_id, cluster_id)
            return None
        except DoksError as e:
            raise e.with_context("error retrieving node pool") from e

        return _to_state(cluster_id, pool)

    def import_state(self, import_id: str) -> ClusterNodePoolState:
        """Adopt a node pool by its composite identifier.

        Raises:
            NotFoundError: Malformed identifier, unknown cluster or no pool
                with that name. The API's own message is kept.
        """
        cluster_id, name = parse_import_id(import_id)

        try:
            pools = self._node_pools.list(cluster_id)
        except NotFoundError as e:
            raise NotFoundError(
                f"Cannot import non-existent remote object {import_id!r}: {e.message}. "
                f"{IMPORT_GUIDANCE}.",
                resource_type="kubernetes_node_pool",
                resource_id=import_id,
                response=e.response,
            ) from e
        except DoksError as e:
            raise e.with_context("error retrieving node pools") from e

        for pool in pools:
            if pool.name == name:
                return _to_state(cluster_id, pool)

        raise NotFoundError(
            f"Cannot import non-existent remote object {import_id!r}: node pool {name!r} "
            f"not found in cluster {cluster_id}. {IMPORT_GUIDANCE}.",
            resource_type="kubernetes_node_pool",
            resource_id=import_id,
        )


def _to_state(cluster_id: str, pool: NodePool) -> ClusterNodePoolState:
    view = flatten_node_pool(pool)
    return ClusterNodePoolState(cluster_id=cluster_id, **view.model_dump())
