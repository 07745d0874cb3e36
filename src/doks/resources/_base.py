"""Base resource class."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from doks._http import HttpClient

KUBERNETES_PATH = "/v2/kubernetes/clusters"


class SyncResource:
    """Base class for synchronous API resources."""

    def __init__(self, http: HttpClient) -> None:
        self._http = http
