"""Compression transformer storing zlib-compressed text as base64."""

import base64
import zlib
from typing import Any

from transformable.core.exceptions import ConfigurationError, TransformerExecutionError
from transformable.transformers.registry import register_transformer_type


class ZlibTransformer:
    """Compresses text values and stores them as ASCII base64.

    Config:
        level: int - zlib compression level, 0-9 or -1 (default -1)
        encoding: str - text encoding of the plain value (default "utf-8")
    """

    def __init__(self, level: int = -1, encoding: str = "utf-8"):
        if level != -1 and not 0 <= level <= 9:
            raise ConfigurationError(
                "zlib 'level' must be between 0 and 9, or -1",
                context={"level": level},
            )
        self._level = level
        self._encoding = encoding

    def transform(self, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, str):
            raise TransformerExecutionError(
                "zlib input must be a string",
                context={"value_type": type(value).__name__},
            )
        compressed = zlib.compress(value.encode(self._encoding), self._level)
        return base64.b64encode(compressed).decode("ascii")

    def reverse_transform(self, value: Any) -> Any:
        if value is None:
            return None
        try:
            raw = base64.b64decode(value, validate=True)
            return zlib.decompress(raw).decode(self._encoding)
        except (ValueError, zlib.error, TypeError) as e:
            raise TransformerExecutionError(
                f"Cannot decompress value: {e}",
                context={"value_type": type(value).__name__},
            ) from e


@register_transformer_type("zlib")
def create_zlib_transformer(options: dict[str, Any]) -> ZlibTransformer:
    """Factory function for ZlibTransformer."""
    unknown = set(options) - {"level", "encoding"}
    if unknown:
        raise ConfigurationError(
            f"Unknown zlib options: {sorted(unknown)}",
            context={"options": sorted(options)},
        )
    return ZlibTransformer(
        level=int(options.get("level", -1)),
        encoding=str(options.get("encoding", "utf-8")),
    )
