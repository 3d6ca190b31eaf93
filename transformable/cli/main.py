"""Main CLI entry point for transformable."""

import click

from transformable import __version__
from transformable.cli.commands.apply import apply
from transformable.cli.commands.list import list_transformers
from transformable.cli.commands.validate import validate


@click.group()
@click.version_option(version=__version__)
def main():
    """Transformable - field-level value transformation for persisted objects."""
    pass


# Register commands
main.add_command(validate)
main.add_command(list_transformers)
main.add_command(apply)


if __name__ == "__main__":
    main()
