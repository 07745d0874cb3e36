"""doks exceptions.

All exceptions inherit from DoksError for easy catching.
"""

from __future__ import annotations

from typing import Any


class DoksError(Exception):
    """Base exception for all doks errors."""

    def __init__(self, message: str, *, response: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.response = response

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"

    def with_context(self, context: str) -> DoksError:
        """Return a copy of this error with an operation prefix.

        The exception class is preserved so callers can still branch on it.
        """
        err = _clone(self)
        err.message = f"{context}: {self.message}"
        err.args = (err.message,)
        return err


class AuthenticationError(DoksError):
    """Invalid or missing API token.

    Check that DIGITALOCEAN_TOKEN is set or pass token to DoksClient.
    """


class RateLimitError(DoksError):
    """Rate limit exceeded.

    Check retry_after for when to retry.
    """

    def __init__(
        self, message: str, *, retry_after: int | None = None, response: Any = None
    ) -> None:
        super().__init__(message, response=response)
        self.retry_after = retry_after


class ValidationError(DoksError):
    """The API rejected the request payload."""

    def __init__(
        self, message: str, *, errors: list[dict[str, Any]] | None = None, response: Any = None
    ) -> None:
        super().__init__(message, response=response)
        self.errors = errors or []


class NotFoundError(DoksError):
    """Resource not found.

    The requested cluster, node pool or credential does not exist.
    """

    def __init__(
        self, message: str, *, resource_type: str = "", resource_id: str = "", response: Any = None
    ) -> None:
        super().__init__(message, response=response)
        self.resource_type = resource_type
        self.resource_id = resource_id


class CredentialsNotFoundError(NotFoundError):
    """Cluster credentials could not be fetched because the cluster is gone."""


class CredentialsParseError(DoksError):
    """A cached credential carries an expiry timestamp that cannot be parsed."""


class ConnectionError(DoksError):
    """Failed to connect to the DigitalOcean API.

    Check network connectivity and api_url configuration.
    """


class TimeoutError(DoksError):
    """Request timed out."""


class ConvergenceTimeoutError(DoksError):
    """A cluster did not reach its target state within the poll budget."""

    def __init__(
        self, message: str, *, cluster_id: str = "", polls: int = 0, response: Any = None
    ) -> None:
        super().__init__(message, response=response)
        self.cluster_id = cluster_id
        self.polls = polls


class ConvergenceCancelledError(ConvergenceTimeoutError):
    """Waiting was aborted by the caller before the cluster converged."""


class ClusterProvisioningError(DoksError):
    """The API reported a terminal failure while provisioning a cluster."""

    def __init__(
        self,
        message: str,
        *,
        cluster_id: str = "",
        status: str | None = None,
        response: Any = None,
    ) -> None:
        super().__init__(message, response=response)
        self.cluster_id = cluster_id
        self.status = status


class ReplacementRequiredError(DoksError):
    """An immutable attribute changed; the cluster must be recreated."""

    def __init__(self, message: str, *, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


def _clone(err: DoksError) -> DoksError:
    clone = err.__class__.__new__(err.__class__)
    clone.__dict__.update(err.__dict__)
    Exception.__init__(clone, err.message)
    return clone
