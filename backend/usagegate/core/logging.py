"""Logging configuration for the usagegate service.

Exposes a module-level ``logger`` (a ``ContextualLogger``) that carries
structured dimensions through every record. Use ``with_context()`` to bind
extra dimensions and ``with_prefix()`` to prepend a component tag:

    from usagegate.core.logging import logger

    refresh_logger = logger.with_prefix("RateLimiter: ").with_context(component="refresh")
    refresh_logger.info("Built a new rate-limit map")

Records are rendered as JSON lines, or as plain text when
``LOCAL_DEVELOPMENT`` is set.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping, Optional

from usagegate.core.config import settings

_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys() | {"message", "asctime"}
)


class _JSONFormatter(logging.Formatter):
    """Render a record and its bound dimensions as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that merges bound dimensions into every record."""

    def __init__(
        self,
        logger: logging.Logger,
        dimensions: Optional[dict[str, Any]] = None,
        prefix: str = "",
    ) -> None:
        super().__init__(logger, dict(dimensions or {}))
        self.dimensions: dict[str, Any] = dict(dimensions or {})
        self.prefix = prefix

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.dimensions)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        if self.prefix:
            msg = f"{self.prefix}{msg}"
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with additional dimensions bound."""
        merged = {**self.dimensions, **dimensions}
        return ContextualLogger(self.logger, merged, self.prefix)

    def with_prefix(self, prefix: str) -> "ContextualLogger":
        """Return a new logger that prepends *prefix* to every message."""
        return ContextualLogger(self.logger, self.dimensions, f"{self.prefix}{prefix}")


class LoggerConfigurator:
    """Builds and configures loggers for the service."""

    _configured = False

    @classmethod
    def setup_root(cls) -> None:
        """Install the stdout handler on the root logger once."""
        if cls._configured:
            return
        handler = logging.StreamHandler(sys.stdout)
        if settings.LOCAL_DEVELOPMENT:
            handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
            )
        else:
            handler.setFormatter(_JSONFormatter())

        root = logging.getLogger()
        root.addHandler(handler)
        root.setLevel(settings.LOG_LEVEL.upper())
        cls._configured = True

    @classmethod
    def configure_logger(
        cls,
        name: str,
        dimensions: Optional[dict[str, Any]] = None,
    ) -> ContextualLogger:
        """Return a ``ContextualLogger`` for *name* with *dimensions* bound."""
        cls.setup_root()
        return ContextualLogger(logging.getLogger(name), dimensions)


logger = LoggerConfigurator.configure_logger(
    "usagegate",
    dimensions={"environment": settings.ENVIRONMENT.value},
)
