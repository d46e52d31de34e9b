"""Container Factory.

All construction logic lives here. The factory reads settings and builds
the container with environment-appropriate implementations:

- PostgreSQL ownership store when ``POSTGRES_*`` is configured;
- HTTP usage source and dispatcher when their base URLs are configured;
- in-memory adapters otherwise, but only in ``local``/``test`` environments.
  Deployed environments fail fast at startup instead.
"""

from datetime import timedelta

from prometheus_client import CollectorRegistry

from usagegate.adapters.emails import HttpNotificationDispatcher, InMemoryNotificationDispatcher
from usagegate.adapters.error_reporting import LoggingErrorReporter, SentryErrorReporter
from usagegate.adapters.metrics import PrometheusRateLimitMetrics
from usagegate.adapters.ownership_store import InMemoryOwnershipStore, PostgresOwnershipStore
from usagegate.adapters.ownership_store.postgres import create_engine
from usagegate.adapters.usage_source import HttpUsageSource, InMemoryUsageSource
from usagegate.core.config import Settings
from usagegate.core.container.container import Container
from usagegate.core.exceptions import NotConfiguredException
from usagegate.core.logging import logger
from usagegate.core.protocols import ErrorReporter, RateLimitMetrics
from usagegate.domains.notifications.protocols import NotificationDispatcherProtocol
from usagegate.domains.rate_limit.builder import SnapshotBuilder
from usagegate.domains.rate_limit.cache import RateLimitCache
from usagegate.domains.rate_limit.protocols import OwnershipStoreProtocol, UsageSourceProtocol
from usagegate.domains.rate_limit.scheduler import RefreshScheduler
from usagegate.domains.rate_limit.service import RateLimitService


def create_container(settings: Settings) -> Container:
    """Build container with environment-appropriate implementations.

    Args:
        settings: Application settings (from core/config)

    Returns:
        Fully constructed Container ready for use

    Raises:
        NotConfiguredException: If a deployed environment lacks a required
            external service.
    """
    # -----------------------------------------------------------------
    # Observability
    # Dedicated registry so /metrics only exposes this service's metrics.
    # -----------------------------------------------------------------
    metrics = PrometheusRateLimitMetrics(registry=CollectorRegistry())
    error_reporter = _create_error_reporter(settings)

    # -----------------------------------------------------------------
    # External collaborators
    # -----------------------------------------------------------------
    ownership_store = _create_ownership_store(settings)
    usage_source = _create_usage_source(settings)
    dispatcher = _create_dispatcher(settings)

    # -----------------------------------------------------------------
    # Rate-limit service
    # Builder + cache + scheduler, composed behind one query facade.
    # -----------------------------------------------------------------
    rate_limit_service = _create_rate_limit_service(
        settings,
        ownership_store=ownership_store,
        usage_source=usage_source,
        dispatcher=dispatcher,
        metrics=metrics,
        error_reporter=error_reporter,
    )

    return Container(
        ownership_store=ownership_store,
        usage_source=usage_source,
        dispatcher=dispatcher,
        metrics=metrics,
        error_reporter=error_reporter,
        rate_limit_service=rate_limit_service,
    )


# ---------------------------------------------------------------------------
# Private factory functions
# ---------------------------------------------------------------------------


def _create_error_reporter(settings: Settings) -> ErrorReporter:
    if not settings.SENTRY_DSN:
        return LoggingErrorReporter()
    reporter = SentryErrorReporter(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT.value,
    )
    reporter.init()
    return reporter


def _require_local(settings: Settings, setting: str) -> None:
    if not settings.is_local:
        raise NotConfiguredException(
            setting,
            f"{setting} must be configured in the {settings.ENVIRONMENT.value} environment",
        )
    logger.warning(f"{setting} not configured, using an in-memory implementation")


def _create_ownership_store(settings: Settings) -> OwnershipStoreProtocol:
    if settings.postgres_configured:
        return PostgresOwnershipStore(create_engine(settings.postgres_url))
    _require_local(settings, "POSTGRES_HOST")
    return InMemoryOwnershipStore()


def _create_usage_source(settings: Settings) -> UsageSourceProtocol:
    if settings.USAGE_ESTIMATOR_URL:
        return HttpUsageSource(
            settings.USAGE_ESTIMATOR_URL,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    _require_local(settings, "USAGE_ESTIMATOR_URL")
    return InMemoryUsageSource()


def _create_dispatcher(settings: Settings) -> NotificationDispatcherProtocol:
    if settings.EMAILS_URL:
        return HttpNotificationDispatcher(settings.EMAILS_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)
    _require_local(settings, "EMAILS_URL")
    return InMemoryNotificationDispatcher(
        retention=timedelta(days=settings.NOTIFICATION_KEY_RETENTION_DAYS),
    )


def _create_rate_limit_service(
    settings: Settings,
    *,
    ownership_store: OwnershipStoreProtocol,
    usage_source: UsageSourceProtocol,
    dispatcher: NotificationDispatcherProtocol,
    metrics: RateLimitMetrics,
    error_reporter: ErrorReporter,
) -> RateLimitService:
    builder = SnapshotBuilder(
        ownership_store,
        usage_source,
        warning_ratio=settings.RATE_LIMIT_WARNING_RATIO,
    )
    cache = RateLimitCache(default_retention_days=settings.DEFAULT_RETENTION_DAYS)
    scheduler = RefreshScheduler(
        builder=builder,
        cache=cache,
        dispatcher=dispatcher,
        metrics=metrics,
        error_reporter=error_reporter,
        interval=settings.RATE_LIMIT_INTERVAL_SECONDS,
    )
    return RateLimitService(cache=cache, scheduler=scheduler)
