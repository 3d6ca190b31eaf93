"""Utilities to load custom transformer modules."""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
from pathlib import Path

from transformable.core.exceptions import ConfigurationError
from transformable.transformers.registry import (
    Transformer,
    list_transformer_types,
    register_transformer_type,
)

logger = logging.getLogger(__name__)


def load_custom_transformers_from_module(module_path: str) -> None:
    """Import a module so its @register_transformer_type declarations run.

    Additionally, classes defined in the module that implement the
    Transformer contract but were not registered explicitly are registered
    under their snake_case class name, minus a ``_transformer`` suffix
    (``RotTransformer`` -> ``rot``). Their constructor receives the options
    as keyword arguments.
    """
    module = _import_module(module_path)

    for name, obj in inspect.getmembers(module, inspect.isclass):
        if obj.__module__ != module.__name__ or not issubclass(obj, Transformer):
            continue
        type_name = _type_name_for(name)
        if type_name and type_name not in list_transformer_types():
            register_transformer_type(type_name, lambda options, cls=obj: cls(**options))
            logger.debug(
                "Registered custom transformer type",
                extra={"context": {"type": type_name, "module": module.__name__}},
            )


def load_custom_transformers(paths: list[str]) -> None:
    """Load all custom transformer modules from the provided paths."""
    for path in paths:
        load_custom_transformers_from_module(path)


def _type_name_for(class_name: str) -> str:
    snake = _camel_to_snake(class_name)
    if snake.endswith("_transformer"):
        snake = snake[: -len("_transformer")]
    return snake


def _camel_to_snake(name: str) -> str:
    out = ""
    for i, ch in enumerate(name):
        if ch.isupper() and i > 0:
            out += "_"
        out += ch.lower()
    return out


def _import_module(module_path: str):
    """Import by module path or file path."""
    path_obj = Path(module_path)
    if path_obj.suffix == ".py" or path_obj.exists():
        spec = importlib.util.spec_from_file_location(path_obj.stem, path_obj)
        if spec is None or spec.loader is None:
            raise ConfigurationError(f"Cannot load module from path: {module_path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)  # type: ignore[arg-type]
        return module

    try:
        return importlib.import_module(module_path)
    except ImportError as exc:
        raise ConfigurationError(
            f"Failed to import custom transformer module '{module_path}': {exc}"
        ) from exc
