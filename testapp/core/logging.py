"""Logging setup.

Log records are emitted as single-line JSON objects so the platform log
pipeline can index them.  ``logger.with_context(...)`` returns a child
logger that attaches extra fields (probe name, operation, ...) to every
record it emits.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping

from testapp.core.config import settings

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys() | {"message", "asctime"}
)


class JSONFormatter(logging.Formatter):
    """Format records as JSON, merging any context fields into the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter carrying a dict of context fields."""

    def __init__(self, logger: logging.Logger, extra: dict[str, Any] | None = None) -> None:
        super().__init__(logger, extra or {})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def with_context(self, **context: Any) -> "ContextualLogger":
        """Return a new logger with ``context`` merged into the current fields."""
        return ContextualLogger(self.logger, {**self.extra, **context})


def _configure_logger(name: str, level: str) -> logging.Logger:
    base = logging.getLogger(name)
    base.setLevel(level.upper())
    if not base.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        base.addHandler(handler)
    base.propagate = False
    return base


logger = ContextualLogger(_configure_logger("testapp", settings.LOG_LEVEL))
