"""
doks - DigitalOcean Kubernetes clusters, declared and reconciled.

Create clusters, keep them in line with their declaration, and keep their
credentials fresh.
"""

from doks._version import __version__
from doks.client import DoksClient
from doks.cluster import ApplyOutcome, ApplyResult, KubernetesClusterResource
from doks.exceptions import (
    AuthenticationError,
    ClusterProvisioningError,
    ConnectionError,
    ConvergenceCancelledError,
    ConvergenceTimeoutError,
    CredentialsNotFoundError,
    CredentialsParseError,
    DoksError,
    NotFoundError,
    RateLimitError,
    ReplacementRequiredError,
    TimeoutError,
    ValidationError,
)
from doks.models import (
    Cluster,
    ClusterSpec,
    ClusterState,
    ClusterStatus,
    Credentials,
    KubeConfig,
    NodePoolSpec,
    NodePoolState,
)
from doks.node_pool import KubernetesNodePoolResource

__all__ = [
    # Version
    "__version__",
    # Client
    "DoksClient",
    # Resources
    "KubernetesClusterResource",
    "KubernetesNodePoolResource",
    "ApplyOutcome",
    "ApplyResult",
    # Models
    "ClusterSpec",
    "NodePoolSpec",
    "Cluster",
    "ClusterStatus",
    "ClusterState",
    "NodePoolState",
    "Credentials",
    "KubeConfig",
    # Exceptions
    "DoksError",
    "AuthenticationError",
    "RateLimitError",
    "ValidationError",
    "NotFoundError",
    "CredentialsNotFoundError",
    "CredentialsParseError",
    "ConnectionError",
    "TimeoutError",
    "ConvergenceTimeoutError",
    "ConvergenceCancelledError",
    "ClusterProvisioningError",
    "ReplacementRequiredError",
]
