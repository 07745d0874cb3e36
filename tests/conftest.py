"""Pytest configuration and fixtures."""

from __future__ import annotations

import base64
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Generator

import pytest
import respx

from doks._config import DoksConfig
from doks.client import DoksClient

CLUSTER_ID = "7cf6f0d4-2b4a-4a3f-8a0d-6a0b5d9b7f10"
POOL_ID = "cdda885e-7663-40c8-bc74-3a036c66545d"
CLUSTERS_PATH = f"/v2/kubernetes/clusters/{CLUSTER_ID}"


class FakeClock:
    """Clock whose waits return at once and advance time."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 1, tzinfo=timezone.utc)
        self.elapsed = 0.0
        self.waits: list[float] = []

    def now(self) -> datetime:
        return self.current + timedelta(seconds=self.elapsed)

    def monotonic(self) -> float:
        return self.elapsed

    def wait(self, seconds: float, cancel: threading.Event | None = None) -> bool:
        self.waits.append(seconds)
        self.elapsed += seconds
        return cancel is not None and cancel.is_set()


@pytest.fixture
def token() -> str:
    """Test API token."""
    return "dop_v1_test_token_12345"


@pytest.fixture
def base_url() -> str:
    """Test API base URL."""
    return "https://api.test.digitalocean.com"


@pytest.fixture
def mock_api(base_url: str) -> Generator[respx.MockRouter, None, None]:
    """Mock API router."""
    with respx.mock(base_url=base_url, assert_all_called=False) as router:
        yield router


@pytest.fixture
def client(token: str, base_url: str) -> Generator[DoksClient, None, None]:
    """Create a test DoksClient, isolated from env and config file."""
    c = DoksClient(token=token, base_url=base_url, config=DoksConfig())
    yield c
    c.close()


@pytest.fixture
def clock() -> FakeClock:
    """Deterministic clock."""
    return FakeClock()


@pytest.fixture
def node_pool_payload() -> Callable[..., dict[str, Any]]:
    """Factory for node pool API objects."""

    def make(**overrides: Any) -> dict[str, Any]:
        pool = {
            "id": POOL_ID,
            "name": "default",
            "size": "s-1vcpu-2gb",
            "count": 1,
            "tags": ["k8s", f"k8s:{CLUSTER_ID}", "one", "two", "terraform:default-node-pool"],
            "nodes": [
                {
                    "id": "3385619f-8ec3-42ba-bb57-1ab3ecc7d47a",
                    "name": "default-3bvq",
                    "status": {"state": "running"},
                    "created_at": "2026-01-01T00:05:00Z",
                    "updated_at": "2026-01-01T00:07:00Z",
                }
            ],
        }
        pool.update(overrides)
        return pool

    return make


@pytest.fixture
def cluster_payload(
    node_pool_payload: Callable[..., dict[str, Any]],
) -> Callable[..., dict[str, Any]]:
    """Factory for cluster API objects."""

    def make(state: str = "running", **overrides: Any) -> dict[str, Any]:
        cluster = {
            "id": CLUSTER_ID,
            "name": "example",
            "region": "lon1",
            "version": "1.15.4-do.0",
            "cluster_subnet": "10.244.0.0/16",
            "service_subnet": "10.245.0.0/16",
            "ipv4": "68.183.121.157",
            "endpoint": f"https://{CLUSTER_ID}.k8s.ondigitalocean.com",
            "tags": ["k8s", f"k8s:{CLUSTER_ID}", "foo", "bar"],
            "node_pools": [node_pool_payload()],
            "status": {"state": state},
            "created_at": "2026-01-01T00:00:00Z",
            "updated_at": "2026-01-01T00:07:00Z",
        }
        cluster.update(overrides)
        return cluster

    return make


@pytest.fixture
def credentials_payload() -> Callable[..., dict[str, Any]]:
    """Factory for credential API objects."""

    def make(**overrides: Any) -> dict[str, Any]:
        creds = {
            "server": f"https://{CLUSTER_ID}.k8s.ondigitalocean.com",
            "certificate_authority_data": base64.b64encode(b"ca-cert").decode(),
            "client_key_data": None,
            "client_certificate_data": None,
            "token": "97ae2bbcfd85c34155a56b822ffa73909d6770b28eb7e5dfa78fa83e02ffc60f",
            "expires_at": "2026-01-08T00:00:00Z",
        }
        creds.update(overrides)
        return creds

    return make


@pytest.fixture
def cluster_id() -> str:
    """ID of the sample cluster."""
    return CLUSTER_ID


@pytest.fixture
def pool_id() -> str:
    """ID of the sample default node pool."""
    return POOL_ID


@pytest.fixture
def clusters_path() -> str:
    """API path of the sample cluster."""
    return CLUSTERS_PATH
