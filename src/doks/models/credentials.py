"""Cluster credential models."""

from __future__ import annotations

import base64
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from doks.models.common import DoksModel


class Credentials(DoksModel):
    """Access credentials returned by ``GET /clusters/{id}/credentials``.

    The API transports the byte fields base64 encoded; raw bytes passed in
    directly are kept as they are.
    """

    server: str
    certificate_authority_data: bytes = b""
    client_key_data: bytes | None = Field(None, repr=False)
    client_certificate_data: bytes | None = None
    token: str = Field("", repr=False)
    expires_at: datetime | None = None

    @field_validator(
        "certificate_authority_data",
        "client_key_data",
        "client_certificate_data",
        mode="before",
    )
    @classmethod
    def _decode_base64(cls, value: Any) -> Any:
        if isinstance(value, str):
            return base64.b64decode(value)
        return value


class KubeConfig(DoksModel):
    """Credential block kept in local state.

    Byte-valued fields are base64 text; ``expires_at`` is RFC 3339.
    """

    raw_config: str = Field("", repr=False)
    host: str = ""
    cluster_ca_certificate: str = ""
    client_key: str | None = Field(None, repr=False)
    client_certificate: str | None = None
    token: str = Field("", repr=False)
    expires_at: str | None = None
