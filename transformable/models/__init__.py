"""Configuration models for transformable."""

from transformable.models.cache_config import CacheConfig
from transformable.models.config import TransformableConfig
from transformable.models.entity_config import FieldSpec
from transformable.models.transformer_config import TransformerSpec

__all__ = [
    "TransformableConfig",
    "TransformerSpec",
    "FieldSpec",
    "CacheConfig",
]
