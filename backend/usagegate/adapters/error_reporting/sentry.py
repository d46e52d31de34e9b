"""Sentry error reporter."""

from typing import Any, Optional

import sentry_sdk

from usagegate.core.logging import logger
from usagegate.core.protocols.error_reporting import ErrorReporter


class SentryErrorReporter(ErrorReporter):
    """Forwards captured exceptions to Sentry.

    ``init()`` must be called once at startup before reports are sent.
    """

    def __init__(self, dsn: str, environment: str, traces_sample_rate: float = 0.0) -> None:
        self._dsn = dsn
        self._environment = environment
        self._traces_sample_rate = traces_sample_rate

    def init(self) -> None:
        """Initialize the Sentry SDK."""
        sentry_sdk.init(
            dsn=self._dsn,
            environment=self._environment,
            traces_sample_rate=self._traces_sample_rate,
        )
        logger.info(f"Sentry initialized (environment={self._environment})")

    def capture_exception(
        self,
        error: BaseException,
        *,
        extra: Optional[dict[str, Any]] = None,
    ) -> None:
        sentry_sdk.capture_exception(error, level="error", extras=extra or {})
