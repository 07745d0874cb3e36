"""Tests for kubeconfig rendering."""

from __future__ import annotations

import base64

import yaml

from doks.kubeconfig import build_kubeconfig, cluster_context_name, render_kubeconfig
from doks.models import Credentials

SERVER = "https://6a37a0f6-c355-4527-b54d-521beffd9817.k8s.ondigitalocean.com"
TOKEN = "97ae2bbcfd85c34155a56b822ffa73909d6770b28eb7e5dfa78fa83e02ffc60f"
CERT_AUTH = (
    b"LS0tLS1CRUdJTiBDRVJUSUZJQ0FURS0tLS0tCk1JSURKekNDQWWlOQT09Ci0tLS0tRU5EIENFUlRJRklDQVRFLS0tLS0K"
)


class TestRenderKubeconfig:
    """Test the rendered kubeconfig document."""

    def test_render_matches_expected_layout(self) -> None:
        """Rendered text should match the expected document byte for byte."""
        creds = Credentials(server=SERVER, certificate_authority_data=CERT_AUTH, token=TOKEN)
        expected = f"""apiVersion: v1
kind: Config
clusters:
- cluster:
    certificate-authority-data: {base64.b64encode(CERT_AUTH).decode()}
    server: {SERVER}
  name: do-lon1-test-cluster
contexts:
- context:
    cluster: do-lon1-test-cluster
    user: do-lon1-test-cluster-admin
  name: do-lon1-test-cluster
current-context: do-lon1-test-cluster
users:
- name: do-lon1-test-cluster-admin
  user:
    token: {TOKEN}
"""

        assert render_kubeconfig("test-cluster", "lon1", creds) == expected

    def test_render_includes_client_certificate(self) -> None:
        """Client key and certificate should precede the token."""
        creds = Credentials(
            server=SERVER,
            certificate_authority_data=b"ca",
            client_key_data=b"key",
            client_certificate_data=b"cert",
            token=TOKEN,
        )

        user = build_kubeconfig("test-cluster", "lon1", creds)["users"][0]["user"]

        assert list(user) == ["client-key-data", "client-certificate-data", "token"]
        assert user["client-key-data"] == "a2V5"
        assert user["client-certificate-data"] == "Y2VydA=="

    def test_render_is_valid_yaml(self) -> None:
        """The rendered text should parse back to the built structure."""
        creds = Credentials(server=SERVER, certificate_authority_data=b"ca", token=TOKEN)

        rendered = render_kubeconfig("example", "nyc1", creds)

        assert yaml.safe_load(rendered) == build_kubeconfig("example", "nyc1", creds)

    def test_context_name(self) -> None:
        """Context names should embed region and cluster name."""
        assert cluster_context_name("example", "nyc1") == "do-nyc1-example"
