"""HTTP client infrastructure for doks.

Handles:
- Authentication via AuthProvider
- Retries with exponential backoff
- Rate limit handling
- Error mapping
"""

from __future__ import annotations

import contextlib
import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from doks._version import __version__
from doks.exceptions import (
    AuthenticationError,
    ConnectionError,
    DoksError,
    NotFoundError,
    RateLimitError,
    TimeoutError,
    ValidationError,
)

if TYPE_CHECKING:
    from doks.auth import AuthProvider

logger = logging.getLogger("doks.http")

DEFAULT_HEADERS = {
    "User-Agent": f"doks-python/{__version__}",
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class HttpClient:
    """Synchronous HTTP client for the DigitalOcean API.

    Every request carries the client's timeout, which acts as the per-call
    deadline.
    """

    def __init__(
        self,
        base_url: str,
        auth: AuthProvider | None = None,
        timeout: float = 60.0,
        max_retries: int = 0,
        verify_ssl: bool = True,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._auth = auth
        self._timeout = timeout
        self._max_retries = max_retries

        self._client = httpx.Client(
            base_url=self._base_url,
            headers=DEFAULT_HEADERS.copy(),
            timeout=timeout,
            verify=verify_ssl,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def get(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        """Perform GET request."""
        return self._request("GET", path, params=params)

    def post(self, path: str, *, json: dict[str, Any] | None = None) -> Any:
        """Perform POST request."""
        return self._request("POST", path, json=json)

    def put(self, path: str, *, json: dict[str, Any] | None = None) -> Any:
        """Perform PUT request."""
        return self._request("PUT", path, json=json)

    def delete(self, path: str) -> Any:
        """Perform DELETE request."""
        return self._request("DELETE", path)

    def _get_auth_headers(self) -> dict[str, str]:
        if self._auth is None:
            return {}
        return self._auth.get_headers()

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Perform HTTP request with retries and error handling."""
        last_exception: Exception | None = None
        retry_count = 0

        while retry_count <= self._max_retries:
            try:
                logger.debug("%s %s", method, path)
                response = self._client.request(
                    method,
                    path,
                    params=_filter_none(params) if params else None,
                    json=json,
                    headers=self._get_auth_headers(),
                )
                return self._handle_response(response)

            except httpx.TimeoutException as e:
                last_exception = TimeoutError(f"Request timed out: {e}")
                retry_count += 1

            except httpx.ConnectError as e:
                last_exception = ConnectionError(f"Failed to connect: {e}")
                retry_count += 1

            except httpx.TransportError as e:
                last_exception = ConnectionError(f"Connection failed: {e}")
                retry_count += 1

            except RateLimitError as e:
                retry_count += 1
                last_exception = e
                if retry_count <= self._max_retries:
                    time.sleep(e.retry_after or (2**retry_count))
                continue

            except (AuthenticationError, ValidationError, NotFoundError):
                # Don't retry these
                raise

            except DoksError as e:
                # Only server errors are worth another attempt
                if e.response is None or e.response.status_code < 500:
                    raise
                last_exception = e
                retry_count += 1

            if retry_count <= self._max_retries:
                logger.debug("Retrying %s %s (attempt %d)", method, path, retry_count)
                time.sleep(2**retry_count * 0.1)

        if last_exception:
            raise last_exception
        raise DoksError("Request failed after retries")

    def _handle_response(self, response: httpx.Response) -> Any:
        """Handle HTTP response and map errors."""
        if response.status_code == 204:
            return None

        try:
            data = response.json()
        except Exception:
            data = None

        if response.is_success:
            return data

        message = self._extract_error_message(data, response)

        if response.status_code == 401:
            raise AuthenticationError(message, response=response)

        if response.status_code == 404:
            raise NotFoundError(message, response=response)

        if response.status_code == 422:
            errors = data.get("errors", []) if isinstance(data, dict) else []
            raise ValidationError(message, errors=errors, response=response)

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            retry_after_int: int | None = None
            if retry_after:
                with contextlib.suppress(ValueError):
                    retry_after_int = int(retry_after)
            raise RateLimitError(
                message,
                retry_after=retry_after_int,
                response=response,
            )

        if response.status_code >= 500:
            raise DoksError(f"Server error: {message}", response=response)

        raise DoksError(message, response=response)

    def _extract_error_message(self, data: Any, response: httpx.Response) -> str:
        """Extract error message from response.

        The DigitalOcean API answers with ``{"id": "...", "message": "..."}``.
        """
        if isinstance(data, dict):
            if "message" in data:
                return data["message"]
            if "error" in data:
                error = data["error"]
                if isinstance(error, str):
                    return error
                if isinstance(error, dict) and "message" in error:
                    return error["message"]

        return f"HTTP {response.status_code}: {response.reason_phrase}"


def _filter_none(params: dict[str, Any]) -> dict[str, Any]:
    """Remove None values from params dict."""
    return {k: v for k, v in params.items() if v is not None}
