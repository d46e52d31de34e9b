"""Fake ownership store and usage source for testing.

Both are seedable, count their calls, and can be told to fail or to block
until released so tests can exercise overlapping refreshes.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Optional

from usagegate.domains.rate_limit.exceptions import SourceFetchError
from usagegate.domains.rate_limit.protocols import OwnershipStoreProtocol, UsageSourceProtocol
from usagegate.domains.rate_limit.types import OwnershipRecord, TargetId


class FakeOwnershipStore(OwnershipStoreProtocol):
    """In-memory fake for OwnershipStoreProtocol."""

    def __init__(self, records: Optional[list[OwnershipRecord]] = None) -> None:
        """Initialize with optional seed records."""
        self.records: list[OwnershipRecord] = list(records or [])
        self.calls = 0
        self._error: Optional[Exception] = None
        self._gate: Optional[asyncio.Event] = None

    def seed(self, *records: OwnershipRecord) -> None:
        """Replace the stored records."""
        self.records = list(records)

    def fail_with(self, error: Optional[Exception] = None) -> None:
        """Make subsequent reads raise *error* (SourceFetchError by default)."""
        self._error = error or SourceFetchError("ownership-store", "fake ownership store down")

    def recover(self) -> None:
        """Stop failing."""
        self._error = None

    def block(self) -> asyncio.Event:
        """Make reads wait until the returned event is set."""
        self._gate = asyncio.Event()
        return self._gate

    async def list_ownership_records(self) -> list[OwnershipRecord]:
        """Return the seeded records."""
        self.calls += 1
        if self._gate is not None:
            await self._gate.wait()
        if self._error is not None:
            raise self._error
        return list(self.records)


class FakeUsageSource(UsageSourceProtocol):
    """In-memory fake for UsageSourceProtocol."""

    def __init__(self, usage: Optional[dict[TargetId, int]] = None) -> None:
        """Initialize with optional seed usage."""
        self.usage: dict[TargetId, int] = dict(usage or {})
        self.windows: list[tuple[datetime, datetime]] = []
        self._error: Optional[Exception] = None

    def seed(self, usage: dict[TargetId, int]) -> None:
        """Replace the stored usage map."""
        self.usage = dict(usage)

    def fail_with(self, error: Optional[Exception] = None) -> None:
        """Make subsequent estimates raise *error* (SourceFetchError by default)."""
        self._error = error or SourceFetchError("usage-source", "fake usage source down")

    def recover(self) -> None:
        """Stop failing."""
        self._error = None

    async def estimate(self, window_start: datetime, window_end: datetime) -> dict[TargetId, int]:
        """Record the window and return the seeded usage."""
        self.windows.append((window_start, window_end))
        if self._error is not None:
            raise self._error
        return dict(self.usage)
