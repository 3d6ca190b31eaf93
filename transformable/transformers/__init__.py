"""Transformers: registry, contract and built-in implementations.

Provides:
- Transformer: the bidirectional conversion contract
- TransformerRegistry: name -> transformer instance lookup
- Transformer type factories: registration and creation by type name
- Built-in transformers: noop, json, zlib, fernet
"""

# Registry must be imported first (other modules use register_transformer_type decorator)
from transformable.transformers.registry import (
    Transformer,
    TransformerFactory,
    TransformerRegistry,
    clear_registry,
    create_transformer,
    list_transformer_types,
    register_transformer_type,
)

# Transformer modules register themselves via @register_transformer_type decorator
from transformable.transformers.compress import ZlibTransformer, create_zlib_transformer
from transformable.transformers.fernet import FernetTransformer, create_fernet_transformer
from transformable.transformers.noop import NoopTransformer, create_noop_transformer
from transformable.transformers.serialize import JsonTransformer, create_json_transformer

__all__ = [
    # Registry
    "Transformer",
    "TransformerFactory",
    "TransformerRegistry",
    "register_transformer_type",
    "create_transformer",
    "list_transformer_types",
    "clear_registry",
    # Transformer classes
    "NoopTransformer",
    "JsonTransformer",
    "ZlibTransformer",
    "FernetTransformer",
    # Factory functions
    "create_noop_transformer",
    "create_json_transformer",
    "create_zlib_transformer",
    "create_fernet_transformer",
]
