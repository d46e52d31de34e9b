"""Root conftest for pytest configuration and shared fixtures.

Loaded before every colocated test package under usagegate/, so its
fixtures are available to domain, adapter and API tests alike.
"""

import os

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables, set before any usagegate module import
# Uses setdefault so real env vars (CI, e2e) are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("METRICS_PORT", "0")


# ---------------------------------------------------------------------------
# Shared fake fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_ownership_store():
    """Seedable fake ownership store."""
    from usagegate.domains.rate_limit.fakes import FakeOwnershipStore

    return FakeOwnershipStore()


@pytest.fixture
def fake_usage_source():
    """Seedable fake usage source."""
    from usagegate.domains.rate_limit.fakes import FakeUsageSource

    return FakeUsageSource()


@pytest.fixture
def fake_dispatcher():
    """Fake dispatcher recording calls and effective deliveries."""
    from usagegate.domains.notifications.fakes import FakeNotificationDispatcher

    return FakeNotificationDispatcher()


@pytest.fixture
def fake_metrics():
    """Fake RateLimitMetrics spy."""
    from usagegate.adapters.metrics import FakeRateLimitMetrics

    return FakeRateLimitMetrics()


@pytest.fixture
def fake_error_reporter():
    """Fake ErrorReporter recording captured exceptions."""
    from usagegate.adapters.error_reporting import FakeErrorReporter

    return FakeErrorReporter()


@pytest.fixture
def fake_rate_limit_service():
    """Fake RateLimitService with canned answers."""
    from usagegate.domains.rate_limit.fakes import FakeRateLimitService

    return FakeRateLimitService()


# ---------------------------------------------------------------------------
# Composed container
# ---------------------------------------------------------------------------


@pytest.fixture
def test_container(
    fake_ownership_store,
    fake_usage_source,
    fake_dispatcher,
    fake_metrics,
    fake_error_reporter,
    fake_rate_limit_service,
):
    """A Container with every dependency replaced by a fake.

    Usage:
        def test_something(test_container):
            test_container.rate_limit_service.set_decision("o1", ...)
    """
    from usagegate.core.container import Container

    return Container(
        ownership_store=fake_ownership_store,
        usage_source=fake_usage_source,
        dispatcher=fake_dispatcher,
        metrics=fake_metrics,
        error_reporter=fake_error_reporter,
        rate_limit_service=fake_rate_limit_service,
    )
