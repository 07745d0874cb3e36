"""Rendering of kubeconfig documents from cluster credentials.

Downstream tooling parses the output, so key names, key order and layout
are fixed.
"""

from __future__ import annotations

import base64
from typing import Any

import yaml

from doks.models.credentials import Credentials


def encode_bytes(data: bytes) -> str:
    """Standard base64 text of a byte-valued credential field."""
    return base64.b64encode(data).decode("ascii")


def cluster_context_name(name: str, region: str) -> str:
    return f"do-{region}-{name}"


def build_kubeconfig(name: str, region: str, creds: Credentials) -> dict[str, Any]:
    """Build the kubeconfig structure for a single cluster, context and user."""
    cluster_name = cluster_context_name(name, region)
    user_name = f"{cluster_name}-admin"

    user: dict[str, str] = {}
    if creds.client_key_data is not None:
        user["client-key-data"] = encode_bytes(creds.client_key_data)
    if creds.client_certificate_data is not None:
        user["client-certificate-data"] = encode_bytes(creds.client_certificate_data)
    user["token"] = creds.token

    return {
        "apiVersion": "v1",
        "kind": "Config",
        "clusters": [
            {
                "cluster": {
                    "certificate-authority-data": encode_bytes(creds.certificate_authority_data),
                    "server": creds.server,
                },
                "name": cluster_name,
            }
        ],
        "contexts": [
            {
                "context": {
                    "cluster": cluster_name,
                    "user": user_name,
                },
                "name": cluster_name,
            }
        ],
        "current-context": cluster_name,
        "users": [
            {
                "name": user_name,
                "user": user,
            }
        ],
    }


def render_kubeconfig(name: str, region: str, creds: Credentials) -> str:
    """Render the kubeconfig YAML text for a cluster."""
    return yaml.safe_dump(
        build_kubeconfig(name, region, creds),
        default_flow_style=False,
        sort_keys=False,
        width=float("inf"),
    )
