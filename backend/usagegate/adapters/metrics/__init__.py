"""Metrics adapters: Prometheus and Fake implementations."""

from usagegate.adapters.metrics.rate_limit import (
    FakeRateLimitMetrics,
    PrometheusRateLimitMetrics,
    RefreshRecord,
)

__all__ = [
    "FakeRateLimitMetrics",
    "PrometheusRateLimitMetrics",
    "RefreshRecord",
]
