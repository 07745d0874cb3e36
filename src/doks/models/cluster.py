"""Kubernetes cluster models.

Three families live here:

- ``*Spec`` models are what the caller declares.
- ``Cluster``/``NodePool``/``Node`` mirror what the DigitalOcean API reports.
- ``*State`` models are the declared-shape view rebuilt from the API on
  every read, plus computed attributes.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import AfterValidator, Field, field_validator

from doks.models.common import DoksModel
from doks.models.credentials import KubeConfig


class ClusterStatus(str, Enum):
    """Cluster status as reported by the API."""

    PROVISIONING = "provisioning"
    RUNNING = "running"
    DEGRADED = "degraded"
    ERROR = "error"
    DELETED = "deleted"
    UPGRADING = "upgrading"
    DELETING = "deleting"
    INVALID = "invalid"


# Tags the API injects on its own; they never round-trip through a read.
SYSTEM_TAG_PREFIXES = ("k8s:", "terraform:")
SYSTEM_TAG = "k8s"


def is_system_tag(tag: str) -> bool:
    return tag == SYSTEM_TAG or tag.startswith(SYSTEM_TAG_PREFIXES)


def _declared_tags(tags: list[str]) -> list[str]:
    reserved = [t for t in tags if is_system_tag(t)]
    if reserved:
        raise ValueError(
            f"reserved tags cannot be declared: {', '.join(reserved)} "
            "('k8s', 'k8s:*' and 'terraform:*' are managed by the API)"
        )
    return list(dict.fromkeys(tags))


# Tags have set semantics; order of first appearance is kept.
TagSet = Annotated[list[str], AfterValidator(_declared_tags)]


class NodePoolSpec(DoksModel):
    """Declared node pool."""

    name: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)
    node_count: int = Field(..., ge=1)
    tags: TagSet = Field(default_factory=list)


class ClusterSpec(DoksModel):
    """Declared cluster.

    ``region`` and ``version`` are fixed at creation; the rest may be updated in
    place.
    """

    name: str = Field(..., min_length=1)
    region: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)
    tags: TagSet = Field(default_factory=list)
    node_pool: NodePoolSpec

    @field_validator("region")
    @classmethod
    def _lower_region(cls, value: str) -> str:
        # API region slugs are always lowercase
        return value.lower()


class ClusterStatusInfo(DoksModel):
    """Nested ``status`` object of a cluster."""

    state: ClusterStatus | str
    message: str | None = None


class Node(DoksModel):
    """A single worker node."""

    id: str
    name: str = ""
    status: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _unwrap_state(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value.get("state")
        return value


class NodePool(DoksModel):
    """Node pool as reported by the API."""

    id: str
    name: str
    size: str
    count: int = 0
    tags: list[str] = Field(default_factory=list)
    nodes: list[Node] = Field(default_factory=list)

    @field_validator("tags", "nodes", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class Cluster(DoksModel):
    """Kubernetes cluster as reported by the API."""

    id: str
    name: str
    region: str = ""
    version: str = ""
    cluster_subnet: str | None = None
    service_subnet: str | None = None
    ipv4: str | None = None
    endpoint: str | None = None
    tags: list[str] = Field(default_factory=list)
    node_pools: list[NodePool] = Field(default_factory=list)
    status: ClusterStatusInfo | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("tags", "node_pools", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def state(self) -> str | None:
        """Shortcut for ``status.state``."""
        return self.status.state if self.status else None


class NodePoolState(DoksModel):
    """Declared-shape view of the default node pool."""

    id: str
    name: str
    size: str
    node_count: int
    tags: list[str] = Field(default_factory=list)
    nodes: list[Node] = Field(default_factory=list)


class ClusterState(DoksModel):
    """Local view of a managed cluster.

    ``node_pool`` is ``None`` when no remote pool carries the default pool
    marker tag.
    """

    id: str
    name: str
    region: str
    version: str
    tags: list[str] = Field(default_factory=list)
    node_pool: NodePoolState | None = None

    # Computed
    cluster_subnet: str | None = None
    service_subnet: str | None = None
    ipv4_address: str | None = None
    endpoint: str | None = None
    status: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    kube_config: KubeConfig | None = Field(None, repr=False)


class ClusterNodePoolState(NodePoolState):
    """A node pool managed on its own, addressed through its parent cluster."""

    cluster_id: str

    @property
    def import_id(self) -> str:
        """Composite ``<cluster_id>,<name>`` identifier."""
        return f"{self.cluster_id},{self.name}"
