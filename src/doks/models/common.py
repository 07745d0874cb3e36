"""Common model configuration shared across resources."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class DoksModel(BaseModel):
    """Base model for all doks models."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True,
    )
