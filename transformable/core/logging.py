"""Logging setup for transformable.

Modules log through ``logging.getLogger(__name__)`` and attach structured
data with ``extra``: ``entity`` and ``field`` name the object and attribute
being transformed, ``context`` carries any other key/value pairs.
"""

import logging
import sys
from typing import IO, Optional, Union

from json_log_formatter import JSONFormatter

ROOT_LOGGER = "transformable"


def configure_logging(
    level: Union[str, int] = "INFO",
    json_format: bool = False,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Install a single handler on the ``transformable`` logger.

    Calling it again replaces the previous handler.

    Args:
        level: Level name (case-insensitive) or numeric level
        json_format: Emit one JSON object per record instead of key=value text
        stream: Handler stream, stdout when omitted

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ContextJSONFormatter() if json_format else StructuredFormatter())
    logger.addHandler(handler)
    return logger


class StructuredFormatter(logging.Formatter):
    """``[LEVEL] entity=.. field=.. key=value message`` lines."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [f"[{record.levelname}]"]
        for attr in ("entity", "field"):
            if hasattr(record, attr):
                parts.append(f"{attr}={getattr(record, attr)}")
        parts.extend(f"{k}={v}" for k, v in getattr(record, "context", {}).items())
        parts.append(record.getMessage())
        return " ".join(parts)


class ContextJSONFormatter(JSONFormatter):
    """JSON records with ``context`` items lifted to the top level."""

    def json_record(self, message: str, extra: dict, record: logging.LogRecord) -> dict:
        context = extra.pop("context", None) or {}
        for key, value in context.items():
            extra.setdefault(key, value)
        extra["level"] = record.levelname
        extra["logger"] = record.name
        return super().json_record(message, extra, record)
