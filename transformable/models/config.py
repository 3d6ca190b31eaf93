"""Root configuration model."""

from typing import Dict, List

from pydantic import BaseModel, Field

from transformable.models.cache_config import CacheConfig
from transformable.models.entity_config import FieldSpec
from transformable.models.transformer_config import TransformerSpec


class TransformableConfig(BaseModel):
    """Complete configuration: transformers, entity fields and cache policy."""

    transformers: Dict[str, TransformerSpec] = Field(
        default_factory=dict, description="Named transformer definitions"
    )
    entities: Dict[str, List[FieldSpec]] = Field(
        default_factory=dict,
        description="Transformable fields keyed by 'module:Class' import path",
    )
    cache: CacheConfig = Field(default_factory=CacheConfig, description="Cache configuration")
    custom_transformers: List[str] = Field(
        default_factory=list,
        description="Modules or .py files defining additional transformer types",
    )

    @classmethod
    def from_dict(cls, data: dict) -> "TransformableConfig":
        """Create config from dictionary (after template rendering)."""
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str, cli_vars: dict[str, str] | None = None) -> "TransformableConfig":
        """
        Load config from YAML file.

        Args:
            path: Path to config YAML file
            cli_vars: Variables passed via CLI (e.g., --vars key=value)

        Returns:
            Validated TransformableConfig instance
        """
        from transformable.models.loader import load_config

        return load_config(path, cli_vars)

    def unresolved_transformers(self) -> list[tuple[str, str, str]]:
        """Return (entity, field, transformer) triples naming undefined transformers.

        Not checked at load time; an unknown name only fails when the field
        is first transformed.
        """
        return [
            (entity, spec.field, spec.transformer)
            for entity, specs in self.entities.items()
            for spec in specs
            if spec.transformer not in self.transformers
        ]
