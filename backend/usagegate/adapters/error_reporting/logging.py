"""Error reporter that only logs.

Used when no Sentry DSN is configured; the caller has already logged the
failure with its traceback, so this adds a single structured line.
"""

from typing import Any, Optional

from usagegate.core.logging import ContextualLogger
from usagegate.core.logging import logger as default_logger
from usagegate.core.protocols.error_reporting import ErrorReporter


class LoggingErrorReporter(ErrorReporter):
    """Writes each reported exception to the service logger."""

    def __init__(self, logger: Optional[ContextualLogger] = None) -> None:
        self._logger = (logger or default_logger).with_context(component="error_reporter")

    def capture_exception(
        self,
        error: BaseException,
        *,
        extra: Optional[dict[str, Any]] = None,
    ) -> None:
        self._logger.warning(
            f"Reported {type(error).__name__}: {error}",
            extra={"error_extra": extra or {}},
        )
