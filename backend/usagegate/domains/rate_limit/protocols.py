"""Rate-limit domain protocols.

OwnershipStoreProtocol / UsageSourceProtocol: read-only external sources.
RateLimitServiceProtocol: the query surface consumed by the transport layer.
"""

from datetime import datetime
from typing import Protocol, runtime_checkable

from usagegate.domains.rate_limit.types import (
    OwnershipRecord,
    RateLimitDecision,
    TargetId,
)


@runtime_checkable
class OwnershipStoreProtocol(Protocol):
    """Read access to every target with its organization and limits."""

    async def list_ownership_records(self) -> list[OwnershipRecord]:
        """Return one record per target.

        Raises:
            SourceFetchError: If the store could not be read.
        """
        ...


@runtime_checkable
class UsageSourceProtocol(Protocol):
    """Read access to per-target operation counts."""

    async def estimate(self, window_start: datetime, window_end: datetime) -> dict[TargetId, int]:
        """Return operation counts per target within the window.

        Targets without usage may be absent from the result.

        Raises:
            SourceFetchError: If the estimate could not be fetched.
        """
        ...


@runtime_checkable
class RateLimitServiceProtocol(Protocol):
    """Synchronous query surface over the published snapshot."""

    def check_limit(self, entity_id: str, entity_kind: str, limit_kind: str) -> RateLimitDecision:
        """Return the cached decision, or the unknown sentinel."""
        ...

    def get_retention(self, target_id: TargetId) -> int:
        """Return the retention in days of the target's organization."""
        ...

    def readiness(self) -> bool:
        """Whether the service is accepting queries."""
        ...

    async def start(self) -> None:
        """Run the first refresh and arm the periodic timer."""
        ...

    async def stop(self) -> None:
        """Cancel the periodic timer."""
        ...
