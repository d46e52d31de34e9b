"""Core protocols shared across domains and adapters."""

from usagegate.core.protocols.error_reporting import ErrorReporter
from usagegate.core.protocols.metrics import RateLimitMetrics

__all__ = [
    "ErrorReporter",
    "RateLimitMetrics",
]
