"""Fake error reporter for testing."""

from dataclasses import dataclass, field
from typing import Any, Optional

from usagegate.core.protocols.error_reporting import ErrorReporter


@dataclass
class CapturedError:
    """One reported exception with its context."""

    error: BaseException
    extra: dict[str, Any] = field(default_factory=dict)


class FakeErrorReporter(ErrorReporter):
    """Records reported exceptions for assertions.

    Usage:
        reporter = FakeErrorReporter()
        await scheduler.refresh_once()

        assert reporter.has_error(SourceFetchError)
    """

    def __init__(self) -> None:
        self.captured: list[CapturedError] = []

    def capture_exception(
        self,
        error: BaseException,
        *,
        extra: Optional[dict[str, Any]] = None,
    ) -> None:
        self.captured.append(CapturedError(error, dict(extra or {})))

    # Test helpers

    def has_error(self, error_type: type[BaseException]) -> bool:
        """Check if an error of the given type was reported."""
        return any(isinstance(c.error, error_type) for c in self.captured)

    def clear(self) -> None:
        """Reset all recorded state."""
        self.captured.clear()
