"""Pydantic base schema utilities for agent runtime models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Base Pydantic model for all runtime schemas.

    Configures common Pydantic behaviors:
    - ``alias_generator=to_camel``: Wire shapes use camelCase keys (``reasonDetail``,
      ``toolManifestMap``) while Python code uses snake_case attributes.
    - ``populate_by_name=True``: Allow initialization by alias or field name.
    - ``extra="forbid"``: Prevent unknown fields from slipping into the model, ensuring strict validation.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_wire(self) -> dict:
        """Dump the model as JSON-ready data with camelCase keys, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
