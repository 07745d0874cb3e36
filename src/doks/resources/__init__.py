"""API resource modules."""

from doks.resources.clusters import Clusters
from doks.resources.node_pools import NodePools

__all__ = [
    "Clusters",
    "NodePools",
]
