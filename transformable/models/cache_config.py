"""Cache configuration model."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class CacheConfig(BaseModel):
    """Configuration for the field value cache."""

    max_entries: Optional[int] = Field(
        default=None,
        description="Upper bound on cached field entries (None = bounded by session lifetime only)",
    )

    @field_validator("max_entries")
    @classmethod
    def validate_max_entries(cls, v):
        """Validate max_entries is positive when set."""
        if v is not None and v < 1:
            raise ValueError("max_entries must be at least 1")
        return v
