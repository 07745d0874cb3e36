"""Tests for credential freshness."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

import httpx
import pytest
import respx

from doks.client import DoksClient
from doks.credentials import CredentialCache, parse_expiry
from doks.exceptions import CredentialsNotFoundError, CredentialsParseError
from doks.models import KubeConfig


def _cached(expires_at: str | None) -> KubeConfig:
    return KubeConfig(raw_config="cached", host="https://cached", token="old", expires_at=expires_at)


class TestParseExpiry:
    """Test expiry parsing."""

    def test_parse_utc(self) -> None:
        """A Z-suffixed timestamp should parse as UTC."""
        assert parse_expiry("2026-01-08T00:00:00Z") == datetime(2026, 1, 8, tzinfo=timezone.utc)

    def test_parse_offset(self) -> None:
        """An explicit offset should be honored."""
        parsed = parse_expiry("2026-01-08T02:00:00+02:00")
        assert parsed == datetime(2026, 1, 8, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "0001-01-01T00:00:00Z"])
    def test_parse_zero(self, value: str | None) -> None:
        """Absent or zero expiries should count as unset."""
        assert parse_expiry(value) is None

    def test_parse_malformed(self) -> None:
        """A malformed expiry should raise."""
        with pytest.raises(CredentialsParseError):
            parse_expiry("next tuesday")


class TestCredentialCache:
    """Test the fetch decision."""

    @pytest.fixture
    def cache(self, client: DoksClient, clock: Any) -> CredentialCache:
        return CredentialCache(client.clusters, clock=clock)

    @pytest.fixture
    def route(
        self,
        mock_api: respx.MockRouter,
        clusters_path: str,
        credentials_payload: Callable[..., dict[str, Any]],
    ) -> respx.Route:
        return mock_api.get(f"{clusters_path}/credentials").mock(
            return_value=httpx.Response(200, json=credentials_payload())
        )

    def test_future_expiry_is_reused(
        self, cache: CredentialCache, route: respx.Route, cluster_id: str
    ) -> None:
        """Credentials that have not expired should not be fetched."""
        cached = _cached("2026-01-02T00:00:00Z")

        block, fetched = cache.get_credentials(cluster_id, cached, name="example", region="lon1")

        assert block is cached
        assert fetched is False
        assert route.call_count == 0

    @pytest.mark.parametrize(
        "expires_at",
        ["2025-12-31T23:59:59Z", "2026-01-01T00:00:00Z", "0001-01-01T00:00:00Z", None],
    )
    def test_stale_expiry_is_fetched_once(
        self,
        cache: CredentialCache,
        route: respx.Route,
        cluster_id: str,
        expires_at: str | None,
    ) -> None:
        """Past, current, zero or absent expiries should trigger exactly one fetch."""
        block, fetched = cache.get_credentials(
            cluster_id, _cached(expires_at), name="example", region="lon1"
        )

        assert fetched is True
        assert route.call_count == 1
        assert block.expires_at == "2026-01-08T00:00:00Z"
        assert block.token.startswith("97ae2b")
        assert "do-lon1-example" in block.raw_config

    def test_no_cache_is_fetched(
        self, cache: CredentialCache, route: respx.Route, cluster_id: str
    ) -> None:
        """Without a cached block the credentials should be fetched."""
        _, fetched = cache.get_credentials(cluster_id, None, name="example", region="lon1")

        assert fetched is True
        assert route.call_count == 1

    def test_malformed_cached_expiry(
        self, cache: CredentialCache, route: respx.Route, cluster_id: str
    ) -> None:
        """A malformed cached expiry should raise instead of fetching."""
        with pytest.raises(CredentialsParseError):
            cache.get_credentials(cluster_id, _cached("garbage"), name="example", region="lon1")

        assert route.call_count == 0

    def test_missing_cluster(
        self,
        cache: CredentialCache,
        mock_api: respx.MockRouter,
        clusters_path: str,
        cluster_id: str,
    ) -> None:
        """A 404 on the credentials call should raise CredentialsNotFoundError."""
        mock_api.get(f"{clusters_path}/credentials").mock(
            return_value=httpx.Response(404, json={"id": "not_found", "message": "gone"})
        )

        with pytest.raises(CredentialsNotFoundError) as exc_info:
            cache.get_credentials(cluster_id, None, name="example", region="lon1")

        assert exc_info.value.resource_id == cluster_id
        assert "gone" in exc_info.value.message

    def test_is_fresh(self, cache: CredentialCache) -> None:
        """Freshness should need a non-zero expiry strictly in the future."""
        assert cache.is_fresh(_cached("2026-06-01T00:00:00Z"))
        assert not cache.is_fresh(_cached("2026-01-01T00:00:00Z"))
        assert not cache.is_fresh(_cached(None))
        assert not cache.is_fresh(None)
