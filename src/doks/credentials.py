"""Credential freshness tracking.

Cluster credentials expire. The block cached in local state is reused while
its expiry lies in the future and fetched again otherwise.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from doks._clock import Clock, SystemClock
from doks.exceptions import CredentialsNotFoundError, CredentialsParseError, NotFoundError
from doks.translate import flatten_credentials

if TYPE_CHECKING:
    from doks.models.credentials import KubeConfig
    from doks.resources.clusters import Clusters

logger = logging.getLogger("doks.credentials")


def parse_expiry(value: str | None) -> datetime | None:
    """Parse an RFC 3339 expiry; ``None`` for absent or zero values.

    Raises:
        CredentialsParseError: If the value is present but malformed.
    """
    if not value:
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise CredentialsParseError(
            f"unable to parse Kubernetes credentials expiry {value!r}: {e}"
        ) from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    # 0001-01-01T00:00:00Z is how an unset expiry is serialized
    if parsed.year == 1:
        return None
    return parsed


class CredentialCache:
    """Decides when cluster credentials must be fetched again.

    Each managed cluster resource owns its own cache; nothing is shared between
    instances.
    """

    def __init__(self, clusters: Clusters, *, clock: Clock | None = None) -> None:
        self._clusters = clusters
        self._clock = clock or SystemClock()

    def is_fresh(self, cached: KubeConfig | None) -> bool:
        """True iff ``cached`` has a non-zero expiry strictly in the future."""
        if cached is None:
            return False
        expires_at = parse_expiry(cached.expires_at)
        return expires_at is not None and expires_at > self._clock.now()

    def get_credentials(
        self,
        cluster_id: str,
        cached: KubeConfig | None,
        *,
        name: str,
        region: str,
    ) -> tuple[KubeConfig, bool]:
        """Return usable credentials for a cluster.

        Args:
            cluster_id: The cluster ID.
            cached: Credential block from the previous read, if any.
            name: Cluster name, used for the kubeconfig context names.
            region: Cluster region slug.

        Returns:
            Tuple of the credential block and whether it was fetched.

        Raises:
            CredentialsNotFoundError: The API does not know the cluster.
            CredentialsParseError: The cached expiry is malformed.
            DoksError: Any other API failure.
        """
        if cached is not None and self.is_fresh(cached):
            return cached, False

        logger.debug("Fetching credentials for cluster %s", cluster_id)
        try:
            creds = self._clusters.get_credentials(cluster_id)
        except NotFoundError as e:
            raise CredentialsNotFoundError(
                f"unable to fetch Kubernetes credentials: {e.message}",
                resource_type="kubernetes_cluster",
                resource_id=cluster_id,
                response=e.response,
            ) from e

        return flatten_credentials(name, region, creds), True
