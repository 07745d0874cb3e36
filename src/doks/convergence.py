"""Waiting for a submitted cluster to become usable.

Cluster creation returns immediately while the API keeps provisioning in the
background. ``ClusterWaiter`` polls the cluster at a fixed interval and walks a
small state machine until it lands on a terminal state:

    POLLING -> SUCCEEDED | FAILED | TIMED_OUT | CANCELLED

Only "not running yet" is retried. An error from the poll call itself ends the
wait immediately. Nothing is persisted between polls, so a restarted process
starts over with a fresh budget.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import TYPE_CHECKING

from doks._clock import Clock, SystemClock
from doks._config import DEFAULT_MAX_POLLS, DEFAULT_POLL_INTERVAL
from doks.exceptions import (
    ClusterProvisioningError,
    ConvergenceCancelledError,
    ConvergenceTimeoutError,
    DoksError,
    NotFoundError,
)
from doks.models.cluster import Cluster, ClusterStatus

if TYPE_CHECKING:
    from doks.resources.clusters import Clusters

logger = logging.getLogger("doks.convergence")

FAILED_STATES = frozenset({ClusterStatus.ERROR.value, ClusterStatus.INVALID.value})


class PollState(str, Enum):
    """Position of a wait in its state machine."""

    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self is not PollState.POLLING


class ClusterWaiter:
    """Polls a cluster until it is running.

    Example:
        ```python
        waiter = ClusterWaiter(client.clusters)
        cluster = waiter.wait_for_running(cluster_id)
        ```

    Args:
        clusters: Clusters resource used for each poll.
        clock: Time source; tests inject a fake one.
        poll_interval: Seconds between polls.
        max_polls: Poll budget before giving up.
    """

    def __init__(
        self,
        clusters: Clusters,
        *,
        clock: Clock | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_polls: int = DEFAULT_MAX_POLLS,
    ) -> None:
        self._clusters = clusters
        self._clock = clock or SystemClock()
        self._poll_interval = poll_interval
        self._max_polls = max_polls

    def wait_for_running(
        self,
        cluster_id: str,
        *,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> Cluster:
        """Block until the cluster reports ``running``.

        Args:
            cluster_id: ID returned by the create call.
            cancel: Set by the caller to abort the wait.
            timeout: Optional wall-clock limit in seconds, on top of the poll
                budget.

        Returns:
            The fully populated cluster as of the last poll.

        Raises:
            ClusterProvisioningError: The API reported a failed cluster.
            ConvergenceTimeoutError: The poll budget ran out.
            ConvergenceCancelledError: ``cancel`` was set or ``timeout`` hit.
            DoksError: A poll call failed.
        """
        started = self._clock.monotonic()
        polls = 0
        state = PollState.POLLING
        cluster: Cluster | None = None

        while not state.terminal:
            cluster = self._poll(cluster_id)
            polls += 1
            state = self._next_state(cluster, polls)

            if state is PollState.POLLING:
                deadline_hit = (
                    timeout is not None
                    and self._clock.monotonic() - started + self._poll_interval > timeout
                )
                if deadline_hit or (cancel is not None and cancel.is_set()):
                    state = PollState.CANCELLED
                elif self._clock.wait(self._poll_interval, cancel):
                    state = PollState.CANCELLED

        logger.debug("Cluster %s wait ended as %s after %d polls", cluster_id, state.value, polls)

        if state is PollState.SUCCEEDED and cluster is not None:
            return cluster

        if state is PollState.FAILED and cluster is not None:
            message = cluster.status.message if cluster.status else None
            raise ClusterProvisioningError(
                f"cluster {cluster_id} entered state {cluster.state!r}"
                + (f": {message}" if message else ""),
                cluster_id=cluster_id,
                status=cluster.state,
            )

        if state is PollState.CANCELLED:
            raise ConvergenceCancelledError(
                f"waiting for cluster {cluster_id} was cancelled after {polls} polls",
                cluster_id=cluster_id,
                polls=polls,
            )

        raise ConvergenceTimeoutError(
            f"timeout waiting for cluster {cluster_id} to become running after {polls} polls",
            cluster_id=cluster_id,
            polls=polls,
        )

    def _poll(self, cluster_id: str) -> Cluster | None:
        """Read the cluster; ``None`` while the API does not show it yet."""
        try:
            cluster = self._clusters.get(cluster_id)
        except NotFoundError:
            logger.debug("Cluster %s not visible yet", cluster_id)
            return None
        except DoksError as e:
            raise e.with_context("error trying to read cluster state") from e

        logger.debug("Cluster %s is %s", cluster_id, cluster.state)
        return cluster

    def _next_state(self, cluster: Cluster | None, polls: int) -> PollState:
        if cluster is not None:
            if cluster.state == ClusterStatus.RUNNING.value:
                return PollState.SUCCEEDED
            if cluster.state in FAILED_STATES:
                return PollState.FAILED
        if polls >= self._max_polls:
            return PollState.TIMED_OUT
        return PollState.POLLING
