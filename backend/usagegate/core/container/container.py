"""Dependency Injection Container.

The container is an immutable dataclass holding protocol implementations.
It has no construction logic; that belongs in the factory.
"""

from dataclasses import dataclass, replace
from typing import Any

from usagegate.core.protocols import ErrorReporter, RateLimitMetrics
from usagegate.domains.notifications.protocols import NotificationDispatcherProtocol
from usagegate.domains.rate_limit.protocols import (
    OwnershipStoreProtocol,
    RateLimitServiceProtocol,
    UsageSourceProtocol,
)


@dataclass(frozen=True)
class Container:
    """Immutable container holding all protocol implementations.

    Usage:
        # Production: use the global container built by the factory
        from usagegate.core.container import container
        decision = container.rate_limit_service.check_limit(...)

        # Testing: construct directly with fakes
        test_container = Container(rate_limit_service=FakeRateLimitService(), ...)

        # FastAPI endpoints: use Inject() to pull individual protocols
        from usagegate.api.deps import Inject
        async def my_endpoint(service: RateLimitServiceProtocol = Inject(RateLimitServiceProtocol)):
            ...
    """

    ownership_store: OwnershipStoreProtocol
    usage_source: UsageSourceProtocol
    dispatcher: NotificationDispatcherProtocol
    metrics: RateLimitMetrics
    error_reporter: ErrorReporter
    rate_limit_service: RateLimitServiceProtocol

    def replace(self, **changes: Any) -> "Container":
        """Create a new container with some dependencies replaced.

        Example:
            test_container = prod_container.replace(dispatcher=FakeNotificationDispatcher())
        """
        return replace(self, **changes)
