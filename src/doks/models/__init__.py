"""Pydantic models for doks."""

from doks.models.cluster import (
    Cluster,
    ClusterNodePoolState,
    ClusterSpec,
    ClusterState,
    ClusterStatus,
    ClusterStatusInfo,
    Node,
    NodePool,
    NodePoolSpec,
    NodePoolState,
)
from doks.models.common import DoksModel
from doks.models.credentials import Credentials, KubeConfig

__all__ = [
    "DoksModel",
    # Declared
    "ClusterSpec",
    "NodePoolSpec",
    # Observed
    "Cluster",
    "ClusterStatus",
    "ClusterStatusInfo",
    "NodePool",
    "Node",
    # Local state
    "ClusterState",
    "NodePoolState",
    "ClusterNodePoolState",
    # Credentials
    "Credentials",
    "KubeConfig",
]
