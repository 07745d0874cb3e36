"""Node pools resource for doks."""

from __future__ import annotations

from doks.models.cluster import NodePool
from doks.resources._base import KUBERNETES_PATH, SyncResource


class NodePools(SyncResource):
    """Node pools of a Kubernetes cluster."""

    def list(self, cluster_id: str) -> list[NodePool]:
        """List the node pools of a cluster."""
        data = self._http.get(f"{KUBERNETES_PATH}/{cluster_id}/node_pools")
        return [NodePool.model_validate(item) for item in data.get("node_pools", [])]

    def get(self, cluster_id: str, pool_id: str) -> NodePool:
        """Get a single node pool."""
        data = self._http.get(f"{KUBERNETES_PATH}/{cluster_id}/node_pools/{pool_id}")
        return NodePool.model_validate(data["node_pool"])

    def update(
        self,
        cluster_id: str,
        pool_id: str,
        *,
        name: str,
        size: str,
        count: int,
        tags: list[str],
    ) -> NodePool:
        """Update a node pool in place.

        Args:
            cluster_id: Parent cluster ID.
            pool_id: Node pool ID.
            name: Node pool name.
            size: Droplet size slug.
            count: Number of nodes.
            tags: Full replacement tag list.

        Returns:
            Updated node pool.
        """
        payload = {"name": name, "size": size, "count": count, "tags": tags}
        data = self._http.put(
            f"{KUBERNETES_PATH}/{cluster_id}/node_pools/{pool_id}", json=payload
        )
        return NodePool.model_validate(data["node_pool"])
