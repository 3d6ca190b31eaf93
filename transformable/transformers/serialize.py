"""JSON serialization transformer for structured field values."""

import json
from typing import Any

from transformable.core.exceptions import ConfigurationError, TransformerExecutionError
from transformable.transformers.registry import register_transformer_type


class JsonTransformer:
    """Stores structured values (dicts, lists, scalars) as JSON text.

    Config:
        sort_keys: bool - emit object keys in sorted order (default False)
        ensure_ascii: bool - escape non-ASCII characters (default False)

    None passes through unchanged so nullable columns stay NULL.
    """

    def __init__(self, sort_keys: bool = False, ensure_ascii: bool = False):
        self._sort_keys = sort_keys
        self._ensure_ascii = ensure_ascii

    def transform(self, value: Any) -> Any:
        if value is None:
            return None
        try:
            return json.dumps(
                value,
                sort_keys=self._sort_keys,
                ensure_ascii=self._ensure_ascii,
                separators=(",", ":"),
            )
        except (TypeError, ValueError) as e:
            raise TransformerExecutionError(
                f"Value is not JSON serializable: {e}",
                context={"value_type": type(value).__name__},
            ) from e

    def reverse_transform(self, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray)):
            value = value.decode("utf-8")
        if not isinstance(value, str):
            raise TransformerExecutionError(
                "JSON input must be a string",
                context={"value_type": type(value).__name__},
            )
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise TransformerExecutionError(
                f"Invalid JSON: {e.msg}",
                context={"line": e.lineno, "column": e.colno},
            ) from e


@register_transformer_type("json")
def create_json_transformer(options: dict[str, Any]) -> JsonTransformer:
    """Factory function for JsonTransformer."""
    unknown = set(options) - {"sort_keys", "ensure_ascii"}
    if unknown:
        raise ConfigurationError(
            f"Unknown json options: {sorted(unknown)}",
            context={"options": sorted(options)},
        )
    return JsonTransformer(
        sort_keys=bool(options.get("sort_keys", False)),
        ensure_ascii=bool(options.get("ensure_ascii", False)),
    )
