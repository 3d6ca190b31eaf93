"""Transformer configuration model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TransformerSpec(BaseModel):
    """
    A named transformer definition.

    Allows flexible transformer-specific options beyond 'type'.
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(description="Transformer type (e.g., 'fernet', 'json', 'zlib', 'noop')")

    def options(self) -> dict[str, Any]:
        """Return the transformer-specific options, excluding 'type'."""
        return dict(self.model_extra or {})
