"""CLI command for validating config files."""

import sys

import click

from transformable import build_coordinator
from transformable.cli.options import parse_cli_vars, vars_option
from transformable.core.exceptions import ConfigurationError
from transformable.core.logging import configure_logging


@click.command()
@click.argument("config_path", type=click.Path(exists=True))
@vars_option
@click.option(
    "--strict",
    is_flag=True,
    help="Fail when an entity field references an undefined transformer",
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Log level (default: WARNING)",
)
def validate(config_path: str, vars: tuple, strict: bool, log_level: str):
    """Validate a transformable config YAML file.

    Checks:
    - YAML syntax and config schema
    - Template variable resolution
    - Transformer options (keys, levels, ...)
    - Entity import paths

    Examples:

        transformable validate transformable.yaml
        transformable validate transformable.yaml --vars key=... --strict
    """
    configure_logging(level=log_level)

    try:
        from transformable.models.loader import load_config

        config = load_config(config_path, cli_vars=parse_cli_vars(vars))
        build_coordinator(config)

        unresolved = config.unresolved_transformers()

        click.echo("✓ Config is valid")
        click.echo(f"  Transformers: {len(config.transformers)}")
        click.echo(f"  Entities: {len(config.entities)}")
        click.echo(f"  Cache max entries: {config.cache.max_entries or 'unbounded'}")

        for entity, field, transformer in unresolved:
            click.echo(
                f"  ! {entity}.{field} uses undefined transformer '{transformer}'",
                err=True,
            )
        if unresolved and strict:
            sys.exit(1)

    except ConfigurationError as e:
        click.echo(f"✗ Config validation failed: {e}", err=True)
        sys.exit(1)
