"""Logging setup for the here_routing package.

Components log through ``logging.getLogger(__name__)`` and attach context
with ``extra=``. This module installs a handler on the package logger that
renders those records either as plain text or as one JSON object per line.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from .config import ObservabilityConfig, get_config

PACKAGE_LOGGER = "here_routing"

# Attributes every LogRecord has; anything else came in through ``extra``.
_RECORD_FIELDS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_FIELDS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per record, ``extra`` fields included."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record),
            "logger": record.name,
            "level": record.levelname,
            "message": record.getMessage(),
        }
        payload.update(_extras(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ContextFormatter(logging.Formatter):
    """Plain formatter that appends ``extra`` fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        extras = _extras(record)
        if extras:
            text += " | " + " ".join(f"{key}={value}" for key, value in extras.items())
        return text


def configure_logging(
    config: Optional[ObservabilityConfig] = None,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """Attach a configured handler to the package logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        config: Logging configuration (defaults to the global config).
        handler: Handler to use instead of a stderr StreamHandler.

    Returns:
        The package logger.
    """
    config = config or get_config().observability
    logger = logging.getLogger(PACKAGE_LOGGER)

    for existing in list(logger.handlers):
        if getattr(existing, "_here_routing", False):
            logger.removeHandler(existing)

    handler = handler or logging.StreamHandler()
    handler.setFormatter(JsonFormatter() if config.structured else ContextFormatter(config.format))
    handler._here_routing = True  # type: ignore[attr-defined]

    logger.addHandler(handler)
    logger.setLevel(config.level.upper())
    return logger
