"""Rate-limit domain exceptions."""

from typing import Optional

from usagegate.core.exceptions import UsageGateException


class SourceFetchError(UsageGateException):
    """Raised when the ownership store or the usage source could not be read.

    The refresh cycle that hit it is abandoned; the next scheduled tick is
    the only retry.
    """

    def __init__(self, source: str, message: Optional[str] = None) -> None:
        """Initialize with the name of the failing source."""
        self.source = source
        self.message = message or f"Failed to fetch from {source}"
        super().__init__(self.message)
