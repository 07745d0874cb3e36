"""Authentication providers for doks.

The DigitalOcean API authenticates with a personal access token sent as a
Bearer header. Providers share one interface so the HTTP client only asks
for request headers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class AuthProvider(ABC):
    """Base authentication provider interface."""

    @abstractmethod
    def get_headers(self) -> dict[str, str]:
        """Return authentication headers for requests."""
        ...

    @property
    @abstractmethod
    def is_authenticated(self) -> bool:
        """True if usable credentials are available."""
        ...


@dataclass
class TokenAuth(AuthProvider):
    """Personal access token authentication.

    Example:
        ```python
        auth = TokenAuth(token="dop_v1_...")
        client = DoksClient(auth=auth)
        ```

    Attributes:
        token: DigitalOcean API token.
    """

    token: str = field(repr=False)  # Never log tokens

    def get_headers(self) -> dict[str, str]:
        """Return Bearer token header."""
        return {"Authorization": f"Bearer {self.token}"}

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)
