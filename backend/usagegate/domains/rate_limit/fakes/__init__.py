"""Fake implementations for rate-limit domain testing."""

from usagegate.domains.rate_limit.fakes.service import FakeRateLimitService
from usagegate.domains.rate_limit.fakes.sources import FakeOwnershipStore, FakeUsageSource

__all__ = ["FakeOwnershipStore", "FakeRateLimitService", "FakeUsageSource"]
