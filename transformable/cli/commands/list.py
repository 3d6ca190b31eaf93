"""CLI command for listing available transformer types."""

import click

from transformable.transformers import list_transformer_types


@click.command("list-transformers")
def list_transformers():
    """List available transformer types.

    Shows all registered transformer types that can be referenced from the
    'type' key of a transformer definition.
    """
    transformer_types = list_transformer_types()

    click.echo("Available Transformers:")
    for transformer_type in sorted(transformer_types):
        click.echo(f"  - {transformer_type}")
