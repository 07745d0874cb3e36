"""Lifecycle of a managed Kubernetes cluster.

``KubernetesClusterResource`` maps create, read, update and delete of a
declared ``ClusterSpec`` onto API calls and returns the refreshed
``ClusterState``. A read or update that finds the cluster gone returns
``None``; the caller decides whether to recreate it (``apply`` does).
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from doks._clock import Clock
from doks.convergence import ClusterWaiter
from doks.credentials import CredentialCache
from doks.exceptions import DoksError, NotFoundError, ReplacementRequiredError
from doks.models.cluster import Cluster, ClusterSpec, ClusterState
from doks.reconcile import ChangeAction, plan_changes
from doks.translate import expand_node_pool, flatten_cluster, node_pool_update_tags

if TYPE_CHECKING:
    from doks.client import DoksClient
    from doks.models.credentials import KubeConfig

logger = logging.getLogger("doks.cluster")

IMPORT_GUIDANCE = "Please verify the ID is correct"


class ApplyOutcome(str, Enum):
    """What ``apply`` ended up doing."""

    CREATED = "created"
    UPDATED = "updated"
    REPLACED = "replaced"
    UNCHANGED = "unchanged"


@dataclass
class ApplyResult:
    state: ClusterState
    outcome: ApplyOutcome


class KubernetesClusterResource:
    """Create, read, update and delete one declared cluster.

    Example:
        ```python
        client = DoksClient()
        resource = KubernetesClusterResource(client)

        state = resource.create(spec)
        state = resource.read(state)        # None if deleted out of band
        state = resource.update(state, new_spec)
        resource.delete(state.id)
        ```

    Args:
        client: API client handle.
        clock: Time source for polling and credential expiry.
        poll_interval: Seconds between convergence polls.
        max_polls: Convergence poll budget.
    """

    def __init__(
        self,
        client: DoksClient,
        *,
        clock: Clock | None = None,
        poll_interval: float | None = None,
        max_polls: int | None = None,
    ) -> None:
        config = client.config
        self._clusters = client.clusters
        self._node_pools = client.node_pools
        self._waiter = ClusterWaiter(
            client.clusters,
            clock=clock,
            poll_interval=poll_interval if poll_interval is not None else config.poll_interval,
            max_polls=max_polls if max_polls is not None else config.max_polls,
        )
        self._credentials = CredentialCache(client.clusters, clock=clock)

    def create(
        self,
        spec: ClusterSpec,
        *,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> ClusterState:
        """Create a cluster and block until it is running.

        Args:
            spec: Declared cluster.
            cancel: Set to abort waiting for the cluster.
            timeout: Optional limit in seconds on the wait.

        Returns:
            State of the running cluster, credentials included.
        """
        try:
            submitted = self._clusters.create(
                name=spec.name,
                region=spec.region,
                version=spec.version,
                node_pools=[expand_node_pool(spec.node_pool)],
                tags=spec.tags,
            )
            logger.debug("Submitted cluster %s (%s)", submitted.id, spec.name)
            cluster = self._waiter.wait_for_running(submitted.id, cancel=cancel, timeout=timeout)
        except DoksError as e:
            raise e.with_context("error creating cluster") from e

        return self._refresh(cluster, cached=None)

    def read(self, state: ClusterState) -> ClusterState | None:
        """Refresh a cluster's state from the API.

        Returns:
            The new state, or None if the cluster no longer exists.
        """
        try:
            cluster = self._clusters.get(state.id)
        except NotFoundError:
            logger.debug("Cluster %s is gone", state.id)
            return None
        except DoksError as e:
            raise e.with_context("error retrieving cluster") from e

        return self._refresh(cluster, cached=state.kube_config)

    def update(self, state: ClusterState, desired: ClusterSpec) -> ClusterState | None:
        """Apply in-place changes to an existing cluster.

        Issues at most one cluster update and one node pool update, and no API
        call at all when nothing changed.

        Returns:
            The refreshed state, or None if the cluster was deleted out of band.

        Raises:
            ReplacementRequiredError: Region or version changed.
            NotFoundError: The default node pool is gone while the cluster exists.
        """
        plan = plan_changes(state, desired)

        if plan.action is ChangeAction.REPLACE:
            raise ReplacementRequiredError(
                f"cluster {state.id} must be replaced to change {', '.join(plan.replace_fields)}",
                fields=plan.replace_fields,
            )
        if plan.action is ChangeAction.NOOP:
            return state

        if plan.cluster_changed:
            try:
                logger.debug("Updating cluster %s name/tags", state.id)
                self._clusters.update(state.id, name=desired.name, tags=desired.tags)
            except NotFoundError:
                logger.debug("Cluster %s vanished during update", state.id)
                return None
            except DoksError as e:
                raise e.with_context("unable to update cluster") from e

        if plan.node_pool_changed and state.node_pool is not None:
            pool = desired.node_pool
            try:
                logger.debug("Updating node pool %s of cluster %s", state.node_pool.id, state.id)
                self._node_pools.update(
                    state.id,
                    state.node_pool.id,
                    name=pool.name,
                    size=pool.size,
                    count=pool.node_count,
                    tags=node_pool_update_tags(pool.tags),
                )
            except NotFoundError as e:
                # Only a missing cluster counts as gone; a missing pool is an error
                if self.read(state) is None:
                    logger.debug("Cluster %s vanished during update", state.id)
                    return None
                raise e.with_context("unable to update node pool") from e
            except DoksError as e:
                raise e.with_context("unable to update node pool") from e

        return self.read(state)

    def delete(self, cluster_id: str) -> None:
        """Delete a cluster; a cluster that is already gone counts as deleted."""
        try:
            self._clusters.delete(cluster_id)
        except NotFoundError:
            logger.debug("Cluster %s already deleted", cluster_id)
        except DoksError as e:
            raise e.with_context("unable to delete cluster") from e

    def apply(
        self,
        state: ClusterState | None,
        desired: ClusterSpec,
        *,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> ApplyResult:
        """Bring the remote cluster in line with ``desired``.

        Refreshes ``state`` first, then creates, updates, replaces or leaves
        the cluster alone.
        """
        current = self.read(state) if state is not None else None

        if current is None:
            created = self.create(desired, cancel=cancel, timeout=timeout)
            return ApplyResult(created, ApplyOutcome.CREATED)

        plan = plan_changes(current, desired)

        if plan.action is ChangeAction.NOOP:
            return ApplyResult(current, ApplyOutcome.UNCHANGED)

        if plan.action is ChangeAction.REPLACE:
            logger.info(
                "Replacing cluster %s (%s changed)", current.id, ", ".join(plan.replace_fields)
            )
            self.delete(current.id)
            created = self.create(desired, cancel=cancel, timeout=timeout)
            return ApplyResult(created, ApplyOutcome.REPLACED)

        updated = self.update(current, desired)
        if updated is None:
            created = self.create(desired, cancel=cancel, timeout=timeout)
            return ApplyResult(created, ApplyOutcome.CREATED)
        return ApplyResult(updated, ApplyOutcome.UPDATED)

    def import_state(self, cluster_id: str) -> ClusterState:
        """Adopt an existing cluster by ID.

        Raises:
            NotFoundError: No cluster has this ID.
        """
        try:
            cluster = self._clusters.get(cluster_id)
        except NotFoundError as e:
            raise NotFoundError(
                f"Cannot import non-existent remote object {cluster_id!r}: {e.message}. "
                f"{IMPORT_GUIDANCE}.",
                resource_type="kubernetes_cluster",
                resource_id=cluster_id,
                response=e.response,
            ) from e
        except DoksError as e:
            raise e.with_context("error retrieving cluster") from e

        return self._refresh(cluster, cached=None)

    def _refresh(self, cluster: Cluster, cached: KubeConfig | None) -> ClusterState:
        try:
            kube_config, fetched = self._credentials.get_credentials(
                cluster.id, cached, name=cluster.name, region=cluster.region
            )
        except DoksError as e:
            raise e.with_context("error reading cluster credentials") from e

        if fetched:
            logger.debug("Refreshed credentials of cluster %s", cluster.id)
        return flatten_cluster(cluster, kube_config)
