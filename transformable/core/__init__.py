"""Core module for transformable package."""

from transformable.core.cache import CacheEntry, FieldValueCache
from transformable.core.coordinator import (
    Direction,
    InMemoryHost,
    PersistenceHost,
    TransformCoordinator,
)
from transformable.core.exceptions import (
    ConfigError,
    ConfigurationError,
    TransformableError,
    TransformerExecutionError,
    UnknownTransformerError,
)
from transformable.core.identity import IdentityMap
from transformable.core.metadata import (
    FieldAccessor,
    MetadataRegistry,
    TransformableField,
    transformable_fields,
)

__all__ = [
    "CacheEntry",
    "FieldValueCache",
    "IdentityMap",
    "Direction",
    "PersistenceHost",
    "InMemoryHost",
    "TransformCoordinator",
    "FieldAccessor",
    "MetadataRegistry",
    "TransformableField",
    "transformable_fields",
    "TransformableError",
    "ConfigurationError",
    "UnknownTransformerError",
    "ConfigError",
    "TransformerExecutionError",
]
