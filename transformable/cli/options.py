"""Options shared by CLI commands."""

from typing import Iterable

import click

from transformable.core.exceptions import ConfigurationError

vars_option = click.option(
    "--vars",
    multiple=True,
    help="CLI variables in key=value format (can be used multiple times)",
)


def parse_cli_vars(pairs: Iterable[str]) -> dict[str, str] | None:
    """Turn ``--vars key=value`` pairs into a dict, None when there are none.

    Raises:
        ConfigurationError: If a pair has no ``=``.
    """
    cli_vars = {}
    for pair in pairs:
        if "=" not in pair:
            raise ConfigurationError(
                f"Invalid variable format: {pair}. Use key=value",
                context={"var": pair},
            )
        key, value = pair.split("=", 1)
        cli_vars[key] = value
    return cli_vars or None
