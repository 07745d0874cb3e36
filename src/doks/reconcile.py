"""Drift detection between a declared cluster and its last observed state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from doks.models.cluster import ClusterSpec, ClusterState

logger = logging.getLogger("doks.reconcile")


class ChangeAction(str, Enum):
    """What it takes to bring a cluster to its declared shape."""

    NOOP = "noop"
    UPDATE = "update"
    REPLACE = "replace"


@dataclass
class ChangePlan:
    """Result of comparing declared and observed attributes."""

    action: ChangeAction
    cluster_changed: bool = False
    node_pool_changed: bool = False
    replace_fields: list[str] = field(default_factory=list)


def plan_changes(state: ClusterState, desired: ClusterSpec) -> ChangePlan:
    """Diff the independently mutable fields of a cluster.

    Name and tags map to the cluster update call; name, size, count and tags of
    the default pool map to the node pool update call. A region or version
    change can only be honored by recreating the cluster.

    Tags compare as sets. When the observed state has no default pool (its
    marker tag was removed out of band) the pool is left alone.
    """
    replace_fields = []
    if state.region.lower() != desired.region.lower():
        replace_fields.append("region")
    if state.version != desired.version:
        replace_fields.append("version")
    if replace_fields:
        return ChangePlan(action=ChangeAction.REPLACE, replace_fields=replace_fields)

    cluster_changed = state.name != desired.name or set(state.tags) != set(desired.tags)

    node_pool_changed = False
    pool = state.node_pool
    if pool is None:
        logger.warning(
            "Cluster %s has no node pool tagged as default; node pool changes are skipped",
            state.id,
        )
    else:
        wanted = desired.node_pool
        node_pool_changed = (
            pool.name != wanted.name
            or pool.size != wanted.size
            or pool.node_count != wanted.node_count
            or set(pool.tags) != set(wanted.tags)
        )

    action = ChangeAction.UPDATE if cluster_changed or node_pool_changed else ChangeAction.NOOP
    return ChangePlan(
        action=action,
        cluster_changed=cluster_changed,
        node_pool_changed=node_pool_changed,
    )
