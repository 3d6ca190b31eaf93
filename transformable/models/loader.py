"""Config loader with YAML parsing and template rendering."""

import os
from pathlib import Path
from typing import Dict

import yaml

from transformable.core.exceptions import ConfigError
from transformable.models.config import TransformableConfig
from transformable.models.templates import render_templates
from transformable.transformers.loader import load_custom_transformers


def load_config(path: str, cli_vars: Dict[str, str] | None = None) -> TransformableConfig:
    """
    Load a transformable config from a YAML file.

    Args:
        path: Path to config YAML file
        cli_vars: Variables passed via CLI (e.g., --vars key=value)

    Returns:
        Validated TransformableConfig instance

    Raises:
        ConfigError: If file not found, invalid YAML, template rendering or
            validation fails
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML in config file: {e}", context={"path": str(path)}
        ) from e

    if config_dict is None:
        config_dict = {}
    if not isinstance(config_dict, dict):
        raise ConfigError(
            "Config file must contain a YAML dictionary",
            context={"path": str(path)},
        )

    config_dict = render_templates(config_dict, cli_vars)

    # Custom transformer types must be registered before the registry is built
    custom_modules = config_dict.get("custom_transformers") or []
    if custom_modules:
        base_dir = config_path.parent
        resolved = [
            str((base_dir / p).resolve()) if _looks_like_file(p) and not os.path.isabs(p) else p
            for p in custom_modules
        ]
        load_custom_transformers(resolved)
        config_dict["custom_transformers"] = resolved

    try:
        return TransformableConfig.from_dict(config_dict)
    except Exception as e:
        raise ConfigError(
            f"Config validation failed: {e}", context={"path": str(path)}
        ) from e


def _looks_like_file(module_path: str) -> bool:
    return module_path.endswith(".py") or "/" in module_path or os.sep in module_path
