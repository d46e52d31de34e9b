"""Metrics protocols for dependency injection.

- RateLimitMetrics: refresh-cycle and rate-limit decision instrumentation,
  plus serialization of what was collected for the scrape endpoint
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class RateLimitMetrics(Protocol):
    """Protocol for rate-limit refresh instrumentation."""

    def inc_limited_organization(self, org_id: str, org_name: str) -> None:
        """Count one cycle in which *org_id* was found rate-limited."""
        ...

    def observe_refresh(self, outcome: str, duration: float) -> None:
        """Record a finished refresh cycle.

        Args:
            outcome: ``success``, ``failure`` or ``discarded``.
            duration: Cycle duration in seconds.
        """
        ...

    def set_cached_organizations(self, count: int) -> None:
        """Set the number of organizations in the published snapshot."""
        ...

    def inc_notification(self, template: str, outcome: str) -> None:
        """Count one notification enqueue attempt (``scheduled`` or ``failed``)."""
        ...

    def render(self) -> bytes:
        """Serialize the collected metrics for a scrape."""
        ...
