"""Rate-limit metrics adapters (Prometheus + Fake).

The Prometheus implementation owns a CollectorRegistry and renders it for
the ``/metrics`` route of ``usagegate.api.metrics.MetricsServer``.
"""

from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest

from usagegate.core.protocols.metrics import RateLimitMetrics

_REFRESH_DURATION_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0)


class PrometheusRateLimitMetrics(RateLimitMetrics):
    """Prometheus-backed rate-limit metrics collection."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

        self._limited_organizations = Counter(
            "usagegate_rate_limit_operations_event_org",
            "Refresh cycles in which an organization was rate-limited for operations",
            ["org_id", "org_name"],
            registry=self._registry,
        )

        self._refresh_total = Counter(
            "usagegate_refresh_total",
            "Total rate-limit refresh cycles",
            ["outcome"],
            registry=self._registry,
        )

        self._refresh_duration = Histogram(
            "usagegate_refresh_duration_seconds",
            "Duration of rate-limit refresh cycles in seconds",
            buckets=_REFRESH_DURATION_BUCKETS,
            registry=self._registry,
        )

        self._cached_organizations = Gauge(
            "usagegate_cached_organizations",
            "Organizations in the published rate-limit snapshot",
            registry=self._registry,
        )

        self._notifications_total = Counter(
            "usagegate_notifications_scheduled_total",
            "Notification enqueue attempts",
            ["template", "outcome"],
            registry=self._registry,
        )

    # -- RateLimitMetrics protocol methods --

    def inc_limited_organization(self, org_id: str, org_name: str) -> None:
        self._limited_organizations.labels(org_id=org_id, org_name=org_name).inc()

    def observe_refresh(self, outcome: str, duration: float) -> None:
        self._refresh_total.labels(outcome=outcome).inc()
        self._refresh_duration.observe(duration)

    def set_cached_organizations(self, count: int) -> None:
        self._cached_organizations.set(count)

    def inc_notification(self, template: str, outcome: str) -> None:
        self._notifications_total.labels(template=template, outcome=outcome).inc()

    def render(self) -> bytes:
        return generate_latest(self._registry)


# ---------------------------------------------------------------------------
# Fake
# ---------------------------------------------------------------------------


@dataclass
class RefreshRecord:
    """Single observed refresh cycle."""

    outcome: str
    duration: float


class FakeRateLimitMetrics(RateLimitMetrics):
    """In-memory spy implementing the RateLimitMetrics protocol."""

    def __init__(self) -> None:
        self.limited_organizations: list[tuple[str, str]] = []
        self.refreshes: list[RefreshRecord] = []
        self.cached_organizations: int | None = None
        self.notifications: list[tuple[str, str]] = []
        self.render_calls = 0

    def inc_limited_organization(self, org_id: str, org_name: str) -> None:
        self.limited_organizations.append((org_id, org_name))

    def observe_refresh(self, outcome: str, duration: float) -> None:
        self.refreshes.append(RefreshRecord(outcome, duration))

    def set_cached_organizations(self, count: int) -> None:
        self.cached_organizations = count

    def inc_notification(self, template: str, outcome: str) -> None:
        self.notifications.append((template, outcome))

    def render(self) -> bytes:
        self.render_calls += 1
        return "".join(f"refresh {r.outcome}\n" for r in self.refreshes).encode()

    # -- test helpers --

    def outcomes(self) -> list[str]:
        """Refresh outcomes in the order they were observed."""
        return [r.outcome for r in self.refreshes]

    def clear(self) -> None:
        """Reset all recorded state."""
        self.limited_organizations.clear()
        self.refreshes.clear()
        self.cached_organizations = None
        self.notifications.clear()
        self.render_calls = 0
