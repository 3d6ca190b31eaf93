"""Entity field configuration models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from transformable.core.metadata import TransformableField


class FieldSpec(BaseModel):
    """Configuration of one transformable field of an entity."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(description="Attribute name on the entity")
    transformer: str = Field(description="Name of a transformer defined under 'transformers'")
    storage_name: Optional[str] = Field(
        default=None, description="Storage column/key name (defaults to the field name)"
    )

    @field_validator("field", "transformer")
    @classmethod
    def validate_not_blank(cls, v):
        """Validate names are not blank."""
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v

    def to_field(self) -> TransformableField:
        return TransformableField(
            field=self.field,
            transformer=self.transformer,
            storage_name=self.storage_name,
        )
