"""Rate-limit domain test fixtures and helpers."""

from datetime import datetime, timezone
from typing import Any, Optional

from usagegate.adapters.error_reporting.fake import FakeErrorReporter
from usagegate.adapters.metrics import FakeRateLimitMetrics
from usagegate.domains.notifications.fakes import FakeNotificationDispatcher
from usagegate.domains.rate_limit.builder import SnapshotBuilder
from usagegate.domains.rate_limit.cache import RateLimitCache
from usagegate.domains.rate_limit.fakes import FakeOwnershipStore, FakeUsageSource
from usagegate.domains.rate_limit.scheduler import RefreshScheduler
from usagegate.domains.rate_limit.types import OwnershipRecord

# 2024-01-15T12:00:00Z; window is 2024-01-01T00:00:00Z .. 2024-01-31T23:59:59.999Z
NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
JAN_START_MS = 1704067200000
JAN_END_MS = 1706745599999


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_record(target: str = "t1", organization: str = "o1", **overrides: Any) -> OwnershipRecord:
    defaults = dict(
        target=target,
        organization=organization,
        org_name=f"{organization}-name",
        owner_email=f"owner@{organization}.example.com",
        monthly_limit=100,
        retention_days=30,
    )
    defaults.update(overrides)
    return OwnershipRecord(**defaults)


def _make_builder(
    records: Optional[list[OwnershipRecord]] = None,
    usage: Optional[dict[str, int]] = None,
    warning_ratio: Optional[float] = None,
):
    """Build a SnapshotBuilder wired to seeded fakes."""
    store = FakeOwnershipStore(records)
    source = FakeUsageSource(usage)
    builder = SnapshotBuilder(store, source, warning_ratio=warning_ratio)
    return builder, store, source


def _make_scheduler(
    records: Optional[list[OwnershipRecord]] = None,
    usage: Optional[dict[str, int]] = None,
    *,
    interval: float = 60.0,
    warning_ratio: Optional[float] = None,
    clock=lambda: NOW,
):
    """Build a RefreshScheduler wired to fakes.

    Returns:
        (scheduler, cache, store, source, dispatcher, metrics, reporter)
    """
    builder, store, source = _make_builder(records, usage, warning_ratio)
    cache = RateLimitCache()
    dispatcher = FakeNotificationDispatcher()
    metrics = FakeRateLimitMetrics()
    reporter = FakeErrorReporter()
    scheduler = RefreshScheduler(
        builder=builder,
        cache=cache,
        dispatcher=dispatcher,
        metrics=metrics,
        error_reporter=reporter,
        interval=interval,
        clock=clock,
    )
    return scheduler, cache, store, source, dispatcher, metrics, reporter
