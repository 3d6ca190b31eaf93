"""Pass-through transformer."""

from typing import Any

from transformable.core.exceptions import ConfigurationError
from transformable.transformers.registry import register_transformer_type


class NoopTransformer:
    """Returns values unchanged in both directions."""

    def transform(self, value: Any) -> Any:
        return value

    def reverse_transform(self, value: Any) -> Any:
        return value


@register_transformer_type("noop")
def create_noop_transformer(options: dict[str, Any]) -> NoopTransformer:
    """Factory function for NoopTransformer."""
    if options:
        raise ConfigurationError(
            "noop does not take options",
            context={"options": sorted(options)},
        )
    return NoopTransformer()
