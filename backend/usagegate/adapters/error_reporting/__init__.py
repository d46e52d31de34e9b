"""Error reporting adapters — Sentry, logging-only and fake implementations."""

from usagegate.adapters.error_reporting.fake import FakeErrorReporter
from usagegate.adapters.error_reporting.logging import LoggingErrorReporter
from usagegate.adapters.error_reporting.sentry import SentryErrorReporter

__all__ = ["FakeErrorReporter", "LoggingErrorReporter", "SentryErrorReporter"]
