"""Rate-limit service: the query surface consumed by the transport layer.

Composes the cache (reads) with the refresh scheduler (lifecycle).
Queries never touch the external sources.
"""

from typing import Optional

from usagegate.core.logging import ContextualLogger
from usagegate.core.logging import logger as default_logger
from usagegate.domains.rate_limit.cache import RateLimitCache
from usagegate.domains.rate_limit.protocols import RateLimitServiceProtocol
from usagegate.domains.rate_limit.scheduler import RefreshScheduler
from usagegate.domains.rate_limit.types import (
    UNKNOWN_DECISION,
    LimitKind,
    RateLimitDecision,
    TargetId,
)


class RateLimitService(RateLimitServiceProtocol):
    """Facade over ``RateLimitCache`` and ``RefreshScheduler``."""

    def __init__(
        self,
        cache: RateLimitCache,
        scheduler: RefreshScheduler,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        """Initialize with the cache to read from and the scheduler feeding it."""
        self._cache = cache
        self._scheduler = scheduler
        self._logger = logger or default_logger

    def check_limit(self, entity_id: str, entity_kind: str, limit_kind: str) -> RateLimitDecision:
        """Return the cached decision for an organization or target.

        Only ``operations-reporting`` limits are tracked; any other kind
        yields the unknown sentinel.
        """
        if limit_kind != LimitKind.OPERATIONS_REPORTING.value:
            return UNKNOWN_DECISION
        return self._cache.query(entity_id, entity_kind)

    def get_retention(self, target_id: TargetId) -> int:
        """Return the retention in days for *target_id*."""
        return self._cache.retention_for(target_id)

    def readiness(self) -> bool:
        """Whether the scheduler has attempted its first build and is running."""
        return self._scheduler.readiness()

    async def start(self) -> None:
        """Start the refresh scheduler."""
        await self._scheduler.start()

    async def stop(self) -> None:
        """Stop the refresh scheduler."""
        await self._scheduler.stop()
        self._logger.info("Rate limiter stopped")
