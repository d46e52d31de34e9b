"""Fake rate-limit service for API tests."""

from __future__ import annotations

from usagegate.domains.rate_limit.protocols import RateLimitServiceProtocol
from usagegate.domains.rate_limit.types import (
    DEFAULT_RETENTION_DAYS,
    UNKNOWN_DECISION,
    RateLimitDecision,
    TargetId,
)


class FakeRateLimitService(RateLimitServiceProtocol):
    """Canned-answer implementation of RateLimitServiceProtocol.

    Usage:
        service = FakeRateLimitService()
        service.set_decision("org-1", RateLimitDecision(current=5, quota=10, limited=False))
        service.set_retention("target-1", 7)
    """

    def __init__(self) -> None:
        """Initialize with no decisions and readiness false."""
        self._decisions: dict[str, RateLimitDecision] = {}
        self._retention: dict[TargetId, int] = {}
        self.ready = False
        self.check_calls: list[tuple[str, str, str]] = []
        self.started = False
        self.stopped = False

    def set_decision(self, entity_id: str, decision: RateLimitDecision) -> None:
        """Answer *decision* for *entity_id* regardless of kind."""
        self._decisions[entity_id] = decision

    def set_retention(self, target_id: TargetId, days: int) -> None:
        """Answer *days* for *target_id*."""
        self._retention[target_id] = days

    def check_limit(self, entity_id: str, entity_kind: str, limit_kind: str) -> RateLimitDecision:
        """Return the canned decision or the unknown sentinel."""
        self.check_calls.append((entity_id, entity_kind, limit_kind))
        return self._decisions.get(entity_id, UNKNOWN_DECISION)

    def get_retention(self, target_id: TargetId) -> int:
        """Return the canned retention or the default."""
        return self._retention.get(target_id, DEFAULT_RETENTION_DAYS)

    def readiness(self) -> bool:
        """Return the configured readiness flag."""
        return self.ready

    async def start(self) -> None:
        """Mark started and ready."""
        self.started = True
        self.ready = True

    async def stop(self) -> None:
        """Mark stopped and not ready."""
        self.stopped = True
        self.ready = False
