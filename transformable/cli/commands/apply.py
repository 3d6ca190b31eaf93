"""CLI command for running a configured transformer on a single value."""

import sys

import click

from transformable.cli.options import parse_cli_vars, vars_option
from transformable.core.exceptions import ConfigurationError, TransformerExecutionError
from transformable.core.logging import configure_logging
from transformable.transformers import TransformerRegistry


@click.command()
@click.argument("config_path", type=click.Path(exists=True))
@click.argument("name")
@click.argument("value")
@click.option(
    "--reverse",
    is_flag=True,
    help="Reverse transform (storage value -> plain value)",
)
@vars_option
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Log level (default: WARNING)",
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Use JSON format for logs",
)
def apply(
    config_path: str,
    name: str,
    value: str,
    reverse: bool,
    vars: tuple,
    log_level: str,
    json_logs: bool,
):
    """Transform VALUE with the transformer NAME defined in CONFIG_PATH.

    Useful to inspect stored values or prepare fixtures.

    Examples:

        transformable apply transformable.yaml secret_box "hello"
        transformable apply transformable.yaml secret_box "gAAAA..." --reverse
    """
    configure_logging(level=log_level, json_format=json_logs)

    try:
        from transformable.models.loader import load_config

        config = load_config(config_path, cli_vars=parse_cli_vars(vars))
        transformer = TransformerRegistry.from_config(config).get(name)

        if reverse:
            result = transformer.reverse_transform(value)
        else:
            result = transformer.transform(value)
        click.echo(result)

    except ConfigurationError as e:
        click.echo(f"Config error: {e}", err=True)
        sys.exit(1)
    except TransformerExecutionError as e:
        click.echo(f"Transform error: {e}", err=True)
        sys.exit(1)
