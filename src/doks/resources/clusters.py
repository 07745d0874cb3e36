"""Kubernetes clusters resource for doks."""

from __future__ import annotations

from typing import Any

from doks.models.cluster import Cluster
from doks.models.credentials import Credentials
from doks.resources._base import KUBERNETES_PATH, SyncResource


class Clusters(SyncResource):
    """Kubernetes clusters resource.

    Thin typed wrapper over ``/v2/kubernetes/clusters``. Errors from the HTTP
    layer (``NotFoundError`` and friends) propagate unchanged.

    Example:
        ```python
        from doks import DoksClient

        client = DoksClient(token="dop_v1_...")

        cluster = client.clusters.create(
            name="example",
            region="lon1",
            version="1.15.4-do.0",
            node_pools=[{"name": "default", "size": "s-1vcpu-2gb", "count": 1}],
        )
        creds = client.clusters.get_credentials(cluster.id)
        ```
    """

    def list(self) -> list[Cluster]:
        """List all clusters."""
        data = self._http.get(KUBERNETES_PATH)
        return [Cluster.model_validate(item) for item in data.get("kubernetes_clusters", [])]

    def get(self, cluster_id: str) -> Cluster:
        """Get a specific cluster.

        Args:
            cluster_id: The cluster ID.

        Returns:
            Cluster details.
        """
        data = self._http.get(f"{KUBERNETES_PATH}/{cluster_id}")
        return Cluster.model_validate(data["kubernetes_cluster"])

    def create(
        self,
        name: str,
        region: str,
        version: str,
        node_pools: list[dict[str, Any]],
        tags: list[str] | None = None,
    ) -> Cluster:
        """Submit a cluster creation request.

        The returned cluster is usually still provisioning.

        Args:
            name: Cluster name.
            region: Region slug.
            version: Kubernetes version slug.
            node_pools: Node pool create requests.
            tags: Cluster tags.

        Returns:
            Created cluster.
        """
        payload: dict[str, Any] = {
            "name": name,
            "region": region,
            "version": version,
            "node_pools": node_pools,
        }
        if tags:
            payload["tags"] = tags

        data = self._http.post(KUBERNETES_PATH, json=payload)
        return Cluster.model_validate(data["kubernetes_cluster"])

    def update(
        self,
        cluster_id: str,
        *,
        name: str,
        tags: list[str] | None = None,
    ) -> Cluster:
        """Update a cluster's name and tags.

        Args:
            cluster_id: The cluster ID.
            name: Cluster name.
            tags: Full replacement tag list.

        Returns:
            Updated cluster.
        """
        payload = {"name": name, "tags": tags or []}
        data = self._http.put(f"{KUBERNETES_PATH}/{cluster_id}", json=payload)
        return Cluster.model_validate(data["kubernetes_cluster"])

    def delete(self, cluster_id: str) -> None:
        """Delete a cluster."""
        self._http.delete(f"{KUBERNETES_PATH}/{cluster_id}")

    def get_credentials(self, cluster_id: str) -> Credentials:
        """Fetch fresh access credentials for a cluster."""
        data = self._http.get(f"{KUBERNETES_PATH}/{cluster_id}/credentials")
        return Credentials.model_validate(data)
