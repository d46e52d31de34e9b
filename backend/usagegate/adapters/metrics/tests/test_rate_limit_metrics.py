"""Unit tests for the rate-limit metrics adapters."""

from prometheus_client import CollectorRegistry

from usagegate.adapters.metrics import (
    FakeRateLimitMetrics,
    PrometheusRateLimitMetrics,
)


class TestFakeRateLimitMetrics:
    """Tests for the FakeRateLimitMetrics test helper."""

    def test_records_calls(self):
        fake = FakeRateLimitMetrics()
        fake.inc_limited_organization("o1", "Acme")
        fake.observe_refresh("success", 0.2)
        fake.observe_refresh("failure", 0.1)
        fake.set_cached_organizations(4)
        fake.inc_notification("rate-limit-exceeded", "scheduled")

        assert fake.limited_organizations == [("o1", "Acme")]
        assert fake.outcomes() == ["success", "failure"]
        assert fake.refreshes[0].duration == 0.2
        assert fake.cached_organizations == 4
        assert fake.notifications == [("rate-limit-exceeded", "scheduled")]

    def test_clear_resets_all_state(self):
        fake = FakeRateLimitMetrics()
        fake.inc_limited_organization("o1", "Acme")
        fake.observe_refresh("success", 0.2)
        fake.set_cached_organizations(4)
        fake.inc_notification("rate-limit-exceeded", "failed")

        fake.clear()

        assert fake.limited_organizations == []
        assert fake.refreshes == []
        assert fake.cached_organizations is None
        assert fake.notifications == []


class TestPrometheusRateLimitMetrics:
    """Tests for the Prometheus adapter."""

    def test_registry_is_separate_from_default(self):
        from prometheus_client import REGISTRY

        adapter = PrometheusRateLimitMetrics()
        assert adapter._registry is not REGISTRY

    def test_limited_organization_counter(self):
        registry = CollectorRegistry()
        adapter = PrometheusRateLimitMetrics(registry=registry)

        adapter.inc_limited_organization("o1", "Acme")
        adapter.inc_limited_organization("o1", "Acme")

        value = registry.get_sample_value(
            "usagegate_rate_limit_operations_event_org_total",
            {"org_id": "o1", "org_name": "Acme"},
        )
        assert value == 2.0

    def test_refresh_counter_and_histogram(self):
        registry = CollectorRegistry()
        adapter = PrometheusRateLimitMetrics(registry=registry)

        adapter.observe_refresh("success", 0.3)
        adapter.observe_refresh("failure", 0.1)

        assert registry.get_sample_value("usagegate_refresh_total", {"outcome": "success"}) == 1.0
        assert registry.get_sample_value("usagegate_refresh_total", {"outcome": "failure"}) == 1.0
        assert registry.get_sample_value("usagegate_refresh_duration_seconds_count") == 2.0

    def test_cached_organizations_gauge(self):
        registry = CollectorRegistry()
        adapter = PrometheusRateLimitMetrics(registry=registry)

        adapter.set_cached_organizations(7)
        adapter.set_cached_organizations(3)

        assert registry.get_sample_value("usagegate_cached_organizations") == 3.0

    def test_notification_counter(self):
        registry = CollectorRegistry()
        adapter = PrometheusRateLimitMetrics(registry=registry)

        adapter.inc_notification("rate-limit-exceeded", "scheduled")

        value = registry.get_sample_value(
            "usagegate_notifications_scheduled_total",
            {"template": "rate-limit-exceeded", "outcome": "scheduled"},
        )
        assert value == 1.0


class TestRender:
    def test_prometheus_renders_own_registry(self):
        metrics = PrometheusRateLimitMetrics(registry=CollectorRegistry())
        metrics.set_cached_organizations(2)
        metrics.observe_refresh("discarded", 0.3)

        body = metrics.render()

        assert b"usagegate_cached_organizations 2.0" in body
        assert b'usagegate_refresh_total{outcome="discarded"} 1.0' in body

    def test_registries_are_isolated(self):
        first = PrometheusRateLimitMetrics(registry=CollectorRegistry())
        second = PrometheusRateLimitMetrics(registry=CollectorRegistry())
        first.inc_limited_organization("o1", "Acme")

        assert b'org_id="o1"' not in second.render()

    def test_fake_renders_outcomes_and_counts_calls(self):
        fake = FakeRateLimitMetrics()
        fake.observe_refresh("success", 0.1)
        fake.observe_refresh("failure", 0.1)

        assert fake.render() == b"refresh success\nrefresh failure\n"
        assert fake.render_calls == 1
