"""Transformable - field-level value transformation for persisted objects.

Keeps a plain in-memory value on an object while storage sees a transformed
one (encrypted, serialized, compressed), driven by persistence lifecycle
callbacks.
"""

__version__ = "0.1.0"

# Public API
from transformable.api import build_coordinator, from_yaml, from_yaml_coordinator

# Core classes
from transformable.core.cache import CacheEntry, FieldValueCache
from transformable.core.coordinator import (
    Direction,
    InMemoryHost,
    PersistenceHost,
    TransformCoordinator,
)

# Exceptions
from transformable.core.exceptions import (
    ConfigError,
    ConfigurationError,
    TransformableError,
    TransformerExecutionError,
    UnknownTransformerError,
)
from transformable.core.metadata import (
    FieldAccessor,
    MetadataRegistry,
    TransformableField,
    transformable_fields,
)

# Config model
from transformable.models.config import TransformableConfig
from transformable.transformers import (
    Transformer,
    TransformerRegistry,
    register_transformer_type,
)

__all__ = [
    # Version
    "__version__",
    # Public API
    "from_yaml",
    "build_coordinator",
    "from_yaml_coordinator",
    # Core classes
    "TransformCoordinator",
    "Direction",
    "PersistenceHost",
    "InMemoryHost",
    "FieldValueCache",
    "CacheEntry",
    "MetadataRegistry",
    "TransformableField",
    "FieldAccessor",
    "transformable_fields",
    "Transformer",
    "TransformerRegistry",
    "register_transformer_type",
    "TransformableConfig",
    # Exceptions
    "TransformableError",
    "ConfigurationError",
    "UnknownTransformerError",
    "ConfigError",
    "TransformerExecutionError",
]
