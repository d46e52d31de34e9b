"""In-memory usage source used when no usage estimator is configured."""

from datetime import datetime
from typing import Mapping, Optional

from usagegate.domains.rate_limit.protocols import UsageSourceProtocol
from usagegate.domains.rate_limit.types import TargetId


class InMemoryUsageSource(UsageSourceProtocol):
    """Serves a replaceable usage map regardless of the window."""

    def __init__(self, usage: Optional[Mapping[TargetId, int]] = None) -> None:
        self._usage: dict[TargetId, int] = dict(usage or {})

    def replace(self, usage: Mapping[TargetId, int]) -> None:
        """Swap the served usage map for the next estimate."""
        self._usage = dict(usage)

    def record(self, target_id: TargetId, operations: int) -> None:
        """Add *operations* to the usage of *target_id*."""
        self._usage[target_id] = self._usage.get(target_id, 0) + operations

    async def estimate(self, window_start: datetime, window_end: datetime) -> dict[TargetId, int]:
        return dict(self._usage)
