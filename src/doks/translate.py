"""Mapping between declared state and DigitalOcean API shapes.

All functions here are pure. The API returns node pools as an unordered
collection and has no field marking a pool as "the" default one, so the
declared pool is tagged with ``DEFAULT_NODE_POOL_TAG`` on the way out and
found again by that tag on the way back.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from doks.kubeconfig import encode_bytes, render_kubeconfig
from doks.models.cluster import (
    Cluster,
    ClusterState,
    NodePool,
    NodePoolSpec,
    NodePoolState,
    is_system_tag,
)
from doks.models.credentials import Credentials, KubeConfig

# Changing this breaks every cluster already provisioned with it.
DEFAULT_NODE_POOL_TAG = "terraform:default-node-pool"


def filter_tags(tags: Iterable[str]) -> list[str]:
    """Drop tags injected by the API (``k8s``, ``k8s:*``, ``terraform:*``)."""
    return [t for t in tags if not is_system_tag(t)]


def expand_node_pool(pool: NodePoolSpec) -> dict[str, Any]:
    """Build the API request for the declared pool, marker tag included."""
    return {
        "name": pool.name,
        "size": pool.size,
        "count": pool.node_count,
        "tags": _with_marker(pool.tags),
    }


def flatten_node_pool(pool: NodePool) -> NodePoolState:
    """Declared view of a remote pool, without the marker or system tags.

    Tags the pool shares with its parent cluster are kept, so there is no
    parent-tags argument: subtracting them would break the expand/flatten
    round trip for a tag declared on both.
    """
    return NodePoolState(
        id=pool.id,
        name=pool.name,
        size=pool.size,
        node_count=pool.count,
        tags=filter_tags(pool.tags),
        nodes=pool.nodes,
    )


def find_default_node_pool(pools: Iterable[NodePool]) -> NodePool | None:
    """Return the pool carrying the marker tag, if any."""
    for pool in pools:
        if DEFAULT_NODE_POOL_TAG in pool.tags:
            return pool
    return None


def node_pool_update_tags(tags: Iterable[str]) -> list[str]:
    """Tags to send on a node pool update; the marker is always re-appended."""
    return _with_marker(tags)


def flatten_credentials(name: str, region: str, creds: Credentials) -> KubeConfig:
    """Turn fetched credentials into the textual block kept in state."""
    expires_at = None
    if creds.expires_at is not None:
        expires_at = _rfc3339(creds.expires_at)

    return KubeConfig(
        raw_config=render_kubeconfig(name, region, creds),
        host=creds.server,
        cluster_ca_certificate=encode_bytes(creds.certificate_authority_data),
        client_key=_encode_optional(creds.client_key_data),
        client_certificate=_encode_optional(creds.client_certificate_data),
        token=creds.token,
        expires_at=expires_at,
    )


def flatten_cluster(cluster: Cluster, kube_config: KubeConfig | None = None) -> ClusterState:
    """Rebuild the local view of a cluster from what the API reports.

    When no pool carries the marker tag the state simply has no node pool.
    """
    default_pool = find_default_node_pool(cluster.node_pools)

    return ClusterState(
        id=cluster.id,
        name=cluster.name,
        region=cluster.region,
        version=cluster.version,
        tags=filter_tags(cluster.tags),
        node_pool=flatten_node_pool(default_pool) if default_pool else None,
        cluster_subnet=cluster.cluster_subnet,
        service_subnet=cluster.service_subnet,
        ipv4_address=cluster.ipv4,
        endpoint=cluster.endpoint,
        status=cluster.state,
        created_at=cluster.created_at,
        updated_at=cluster.updated_at,
        kube_config=kube_config,
    )


def _with_marker(tags: Iterable[str]) -> list[str]:
    out = [t for t in tags if t != DEFAULT_NODE_POOL_TAG]
    out.append(DEFAULT_NODE_POOL_TAG)
    return out


def _encode_optional(data: bytes | None) -> str | None:
    return encode_bytes(data) if data is not None else None


def _rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
