"""Public Python API for transformable package.

This module provides the main entry points for loading configuration and
building a TransformCoordinator from it.
"""

import importlib
import logging
from typing import Type

from transformable.core.cache import FieldValueCache
from transformable.core.coordinator import TransformCoordinator
from transformable.core.exceptions import ConfigurationError
from transformable.core.metadata import MetadataRegistry
from transformable.models.config import TransformableConfig
from transformable.models.loader import load_config
from transformable.transformers.registry import TransformerRegistry

logger = logging.getLogger(__name__)


def from_yaml(path: str, cli_vars: dict[str, str] | None = None) -> TransformableConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to config YAML file
        cli_vars: Variables for {{ var('KEY') }} templates

    Returns:
        Validated TransformableConfig instance

    Raises:
        ConfigError: If file not found, invalid YAML or validation fails

    Example:
        >>> config = from_yaml("transformable.yaml")
        >>> sorted(config.transformers)
        ['payload', 'secret_box']
    """
    return load_config(path, cli_vars)


def build_coordinator(config: TransformableConfig) -> TransformCoordinator:
    """Build a coordinator with the transformers, entities and cache of ``config``.

    Entity keys are import paths (``package.module:Class``). Transformer names
    used by entity fields are not checked here; an unknown name fails with
    UnknownTransformerError the first time that field is transformed.

    Raises:
        ConfigurationError: If a transformer cannot be created or an entity
            class cannot be imported

    Example:
        >>> coordinator = build_coordinator(from_yaml("transformable.yaml"))
        >>> coordinator.on_after_load(account)
    """
    registry = TransformerRegistry.from_config(config)

    metadata = MetadataRegistry()
    for entity_path, specs in config.entities.items():
        cls = import_entity(entity_path)
        metadata.register(cls, [spec.to_field() for spec in specs])

    cache = FieldValueCache(max_entries=config.cache.max_entries)

    logger.info(
        "Built transform coordinator",
        extra={
            "context": {
                "transformers": len(registry),
                "entities": len(config.entities),
            }
        },
    )
    return TransformCoordinator(registry, metadata=metadata, cache=cache)


def from_yaml_coordinator(
    path: str, cli_vars: dict[str, str] | None = None
) -> TransformCoordinator:
    """Convenience function that combines `from_yaml()` and `build_coordinator()`."""
    return build_coordinator(from_yaml(path, cli_vars))


def import_entity(path: str) -> Type:
    """Import a class from ``module:Class`` (or ``module.Class``)."""
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")
    if not module_name or not attr_path:
        raise ConfigurationError(
            f"Invalid entity path: '{path}'",
            context={"expected": "package.module:Class"},
        )

    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(
            f"Cannot import entity module '{module_name}': {e}",
            context={"entity": path},
        ) from e

    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as e:
            raise ConfigurationError(
                f"Entity '{path}' not found",
                context={"module": module_name, "attribute": attr},
            ) from e

    if not isinstance(target, type):
        raise ConfigurationError(
            f"Entity '{path}' is not a class",
            context={"type": type(target).__name__},
        )
    return target
