"""Tests for mapping between declared and API shapes."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

import pydantic
import pytest

from doks.models import Cluster, ClusterSpec, Credentials, NodePool, NodePoolSpec
from doks.translate import (
    DEFAULT_NODE_POOL_TAG,
    expand_node_pool,
    filter_tags,
    find_default_node_pool,
    flatten_cluster,
    flatten_credentials,
    flatten_node_pool,
    node_pool_update_tags,
)


class TestFilterTags:
    """Test removal of API-injected tags."""

    @pytest.mark.parametrize(
        ("have", "want"),
        [
            (["k8s", "foo"], ["foo"]),
            (["k8s", "k8s:looks-like-a-uuid", "bar"], ["bar"]),
            (["k8s", "k8s:looks-like-a-uuid", "bar", "k8s-this-is-ok"], ["bar", "k8s-this-is-ok"]),
            (["k8s", "k8s:looks-like-a-uuid", "terraform:default-node-pool", "baz"], ["baz"]),
        ],
    )
    def test_filter_tags(self, have: list[str], want: list[str]) -> None:
        """System tags should be dropped and user tags kept in order."""
        assert filter_tags(have) == want

    def test_filter_tags_is_idempotent(self) -> None:
        """Filtering twice should give the same result as filtering once."""
        tags = ["k8s", "k8s:abc", "terraform:anything", "prod", "k8s-ok"]
        assert filter_tags(filter_tags(tags)) == filter_tags(tags)

    def test_filter_tags_empty(self) -> None:
        """An empty tag list should stay empty."""
        assert filter_tags([]) == []


class TestNodePoolTranslation:
    """Test expanding and flattening the default node pool."""

    def test_expand_adds_marker(self) -> None:
        """The create request should carry the marker tag."""
        spec = NodePoolSpec(name="default", size="s-1vcpu-2gb", node_count=2, tags=["one"])

        request = expand_node_pool(spec)

        assert request == {
            "name": "default",
            "size": "s-1vcpu-2gb",
            "count": 2,
            "tags": ["one", DEFAULT_NODE_POOL_TAG],
        }

    def test_update_tags_do_not_duplicate_marker(self) -> None:
        """A marker already present should appear once, at the end."""
        tags = node_pool_update_tags([DEFAULT_NODE_POOL_TAG, "a"])

        assert tags == ["a", DEFAULT_NODE_POOL_TAG]

    def test_update_tags_always_carry_marker(self) -> None:
        """Node pool updates should re-append the marker."""
        assert node_pool_update_tags([]) == [DEFAULT_NODE_POOL_TAG]
        assert node_pool_update_tags(["x", "y"]) == ["x", "y", DEFAULT_NODE_POOL_TAG]

    def test_round_trip(self, node_pool_payload: Callable[..., dict[str, Any]]) -> None:
        """Flattening an expanded pool should give back the declared attributes."""
        spec = NodePoolSpec(name="workers", size="s-2vcpu-4gb", node_count=3, tags=["one", "two"])
        request = expand_node_pool(spec)
        remote = NodePool.model_validate(
            node_pool_payload(
                name=request["name"],
                size=request["size"],
                count=request["count"],
                tags=["k8s", "k8s:abc", *request["tags"]],
            )
        )

        state = flatten_node_pool(remote)

        assert state.name == spec.name
        assert state.size == spec.size
        assert state.node_count == spec.node_count
        assert state.tags == spec.tags
        assert DEFAULT_NODE_POOL_TAG not in state.tags

    def test_flatten_keeps_nodes(self, node_pool_payload: Callable[..., dict[str, Any]]) -> None:
        """Nodes should be exposed with their unwrapped status."""
        state = flatten_node_pool(NodePool.model_validate(node_pool_payload()))

        assert len(state.nodes) == 1
        assert state.nodes[0].name == "default-3bvq"
        assert state.nodes[0].status == "running"

    def test_find_default_by_marker_only(
        self, node_pool_payload: Callable[..., dict[str, Any]]
    ) -> None:
        """The marker should identify the pool whatever its name or position."""
        pools = [
            NodePool.model_validate(node_pool_payload(id="p1", name="default", tags=["k8s"])),
            NodePool.model_validate(
                node_pool_payload(id="p2", name="renamed", tags=[DEFAULT_NODE_POOL_TAG])
            ),
        ]

        found = find_default_node_pool(pools)

        assert found is not None
        assert found.id == "p2"

    def test_find_default_none_without_marker(
        self, node_pool_payload: Callable[..., dict[str, Any]]
    ) -> None:
        """Without a marked pool nothing should be picked."""
        pools = [NodePool.model_validate(node_pool_payload(tags=["one"]))]

        assert find_default_node_pool(pools) is None


class TestClusterTranslation:
    """Test rebuilding cluster state."""

    def test_flatten_cluster(self, cluster_payload: Callable[..., dict[str, Any]]) -> None:
        """Computed attributes should be copied and tags filtered."""
        cluster = Cluster.model_validate(cluster_payload())

        state = flatten_cluster(cluster)

        assert state.name == "example"
        assert state.region == "lon1"
        assert state.tags == ["foo", "bar"]
        assert state.ipv4_address == "68.183.121.157"
        assert state.cluster_subnet == "10.244.0.0/16"
        assert state.status == "running"
        assert state.node_pool is not None
        assert state.node_pool.tags == ["one", "two"]
        assert state.kube_config is None

    def test_flatten_cluster_without_marked_pool(
        self,
        cluster_payload: Callable[..., dict[str, Any]],
        node_pool_payload: Callable[..., dict[str, Any]],
    ) -> None:
        """A cluster whose pools all lack the marker should have no node pool."""
        cluster = Cluster.model_validate(
            cluster_payload(node_pools=[node_pool_payload(tags=["k8s", "one"])])
        )

        state = flatten_cluster(cluster)

        assert state.node_pool is None

    def test_marker_survives_rename_resize_retag(
        self,
        cluster_payload: Callable[..., dict[str, Any]],
        node_pool_payload: Callable[..., dict[str, Any]],
    ) -> None:
        """The marked pool should be found after every mutable field changed."""
        cluster = Cluster.model_validate(
            cluster_payload(
                node_pools=[
                    node_pool_payload(id="other", name="default", tags=["one"]),
                    node_pool_payload(
                        name="renamed",
                        size="s-4vcpu-8gb",
                        count=5,
                        tags=["three", DEFAULT_NODE_POOL_TAG],
                    ),
                ]
            )
        )

        state = flatten_cluster(cluster)

        assert state.node_pool is not None
        assert state.node_pool.name == "renamed"
        assert state.node_pool.size == "s-4vcpu-8gb"
        assert state.node_pool.node_count == 5
        assert state.node_pool.tags == ["three"]


class TestCredentialTranslation:
    """Test flattening of fetched credentials."""

    def test_flatten_credentials(self) -> None:
        """Byte fields should be base64 text and the expiry RFC 3339."""
        creds = Credentials(
            server="https://example.k8s.ondigitalocean.com",
            certificate_authority_data=b"ca",
            client_key_data=b"key",
            client_certificate_data=b"cert",
            token="tok",
            expires_at=datetime(2026, 1, 8, 12, 30, tzinfo=timezone.utc),
        )

        block = flatten_credentials("example", "lon1", creds)

        assert block.host == "https://example.k8s.ondigitalocean.com"
        assert block.cluster_ca_certificate == "Y2E="
        assert block.client_key == "a2V5"
        assert block.client_certificate == "Y2VydA=="
        assert block.token == "tok"
        assert block.expires_at == "2026-01-08T12:30:00Z"
        assert "current-context: do-lon1-example" in block.raw_config

    def test_flatten_credentials_without_client_cert(self) -> None:
        """Missing client key and certificate should stay absent."""
        creds = Credentials(server="https://x", certificate_authority_data=b"ca", token="t")

        block = flatten_credentials("example", "lon1", creds)

        assert block.client_key is None
        assert block.client_certificate is None
        assert block.expires_at is None


class TestDeclaredTags:
    """Test validation of declared tags."""

    @pytest.mark.parametrize("tag", ["k8s", "k8s:abc", "terraform:default-node-pool"])
    def test_reserved_tags_rejected(self, tag: str) -> None:
        """Tags the API manages should not be declarable on cluster or pool."""
        with pytest.raises(pydantic.ValidationError, match="reserved tags"):
            NodePoolSpec(name="default", size="s-1vcpu-2gb", node_count=1, tags=[tag])

        with pytest.raises(pydantic.ValidationError, match="reserved tags"):
            ClusterSpec(
                name="example",
                region="lon1",
                version="1.15.4-do.0",
                tags=["prod", tag],
                node_pool=NodePoolSpec(name="default", size="s-1vcpu-2gb", node_count=1),
            )

    def test_lookalike_tags_allowed(self) -> None:
        """Tags that only resemble system tags should be kept."""
        spec = NodePoolSpec(
            name="default", size="s-1vcpu-2gb", node_count=1, tags=["k8s-this-is-ok", "tf"]
        )

        assert spec.tags == ["k8s-this-is-ok", "tf"]
