"""Error reporting protocol.

Refresh failures are never fatal; they are logged and forwarded to an
external sink so persistent outages stay visible.
"""

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class ErrorReporter(Protocol):
    """Forwards exceptions to an observability backend."""

    def capture_exception(
        self,
        error: BaseException,
        *,
        extra: Optional[dict[str, Any]] = None,
    ) -> None:
        """Report *error* with optional structured context."""
        ...
