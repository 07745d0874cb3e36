"""doks client.

Main entry point for talking to the DigitalOcean Kubernetes API.
"""

from __future__ import annotations

from typing import Any

from doks._config import DoksConfig
from doks._http import HttpClient
from doks.auth import AuthProvider, TokenAuth
from doks.exceptions import AuthenticationError
from doks.resources.clusters import Clusters
from doks.resources.node_pools import NodePools


class DoksClient:
    """Synchronous client for the DigitalOcean Kubernetes API.

    The client is a plain handle: construct one and pass it to whatever needs
    API access. It holds no per-cluster state, so one client can serve many
    cluster resources.

    Example:
        ```python
        from doks import DoksClient

        with DoksClient(token="dop_v1_...") as client:
            for cluster in client.clusters.list():
                print(cluster.name, cluster.state)
        ```

    Environment variables:
        DIGITALOCEAN_TOKEN: API token (DOKS_TOKEN is accepted too)
        DOKS_API_URL: Base URL (default: https://api.digitalocean.com)
        DOKS_TIMEOUT: Request timeout in seconds (default: 60)
        DOKS_MAX_RETRIES: Max retries of failed requests (default: 0)

    Auth priority (highest to lowest):
        1. Explicit `auth` parameter
        2. Explicit `token` parameter
        3. Environment variables
        4. Config file
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        auth: AuthProvider | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        verify_ssl: bool | None = None,
        config: DoksConfig | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            token: API token.
            auth: Explicit AuthProvider instance to use.
            base_url: API base URL.
            timeout: Request timeout in seconds.
            max_retries: Maximum number of retries for failed requests.
            verify_ssl: Whether to verify SSL certificates.
            config: Preloaded configuration; loaded from env and file if omitted.
        """
        self.config = config or DoksConfig.load()

        self._base_url = base_url or self.config.base_url
        self._timeout = timeout if timeout is not None else self.config.timeout
        self._max_retries = max_retries if max_retries is not None else self.config.max_retries
        self._verify_ssl = verify_ssl if verify_ssl is not None else self.config.verify_ssl

        self._auth = self._resolve_auth(token=token, auth=auth)

        self._http = HttpClient(
            base_url=self._base_url,
            auth=self._auth,
            timeout=self._timeout,
            max_retries=self._max_retries,
            verify_ssl=self._verify_ssl,
        )

        self.clusters = Clusters(self._http)
        self.node_pools = NodePools(self._http)

    def _resolve_auth(
        self,
        token: str | None = None,
        auth: AuthProvider | None = None,
    ) -> AuthProvider:
        if auth is not None:
            if not auth.is_authenticated:
                raise AuthenticationError("The provided auth has no usable credentials.")
            return auth
        if token:
            return TokenAuth(token=token)
        if self.config.token:
            return TokenAuth(token=self.config.token)

        raise AuthenticationError(
            "API token is required. Set DIGITALOCEAN_TOKEN, pass token to DoksClient, "
            "or run `doks config set token <token>`."
        )

    def close(self) -> None:
        """Close the client and release resources."""
        self._http.close()

    def __enter__(self) -> DoksClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"DoksClient(base_url={self._base_url!r})"

    @property
    def base_url(self) -> str:
        return self._base_url
