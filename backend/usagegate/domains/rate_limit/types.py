"""Rate-limit domain types and pure business logic.

Constants, enums, value objects and pure functions used by the snapshot
builder, the cache and the service facade. No IO; everything here is
deterministic.
"""

import calendar
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from types import MappingProxyType
from typing import Mapping

TargetId = str
OrganizationId = str

DEFAULT_RETENTION_DAYS = 30

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


class EntityKind(str, Enum):
    """Kind of entity a rate-limit query is issued for."""

    ORGANIZATION = "organization"
    TARGET = "target"


class LimitKind(str, Enum):
    """Kind of limit being checked."""

    OPERATIONS_REPORTING = "operations-reporting"


@dataclass(frozen=True)
class OwnershipRecord:
    """One target and the organization that owns it, with its limits."""

    target: TargetId
    organization: OrganizationId
    org_name: str
    owner_email: str
    monthly_limit: int
    retention_days: int


@dataclass(frozen=True)
class UsageWindow:
    """Calendar-month billing window."""

    start_time: datetime
    end_time: datetime

    @property
    def start_ms(self) -> int:
        """Window start as epoch milliseconds."""
        return (self.start_time - _EPOCH) // _ONE_MS

    @property
    def end_ms(self) -> int:
        """Window end as epoch milliseconds."""
        return (self.end_time - _EPOCH) // _ONE_MS

    def describe(self) -> str:
        """Render the window as two RFC 1123 UTC strings."""
        return f"{_http_date(self.start_time)} -> {_http_date(self.end_time)}"


def _http_date(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%a, %d %b %Y %H:%M:%S GMT")


def usage_window_for(now: datetime) -> UsageWindow:
    """Return the first and last instant of the calendar month containing *now*.

    Naive datetimes are taken as UTC; aware ones are converted to UTC. The
    end is the last millisecond of the month so that it survives the
    millisecond round-trip in notification periods unchanged.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        now = now.astimezone(timezone.utc)
    last_day = calendar.monthrange(now.year, now.month)[1]
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    end = now.replace(day=last_day, hour=23, minute=59, second=59, microsecond=999000)
    return UsageWindow(start_time=start, end_time=end)


@dataclass(frozen=True)
class RateLimitDecision:
    """Usage, quota and the resulting limited flag for one organization."""

    current: int
    quota: int
    limited: bool

    @property
    def is_unknown(self) -> bool:
        """Whether this is the sentinel returned for unresolved lookups."""
        return self.current < 0 and self.quota < 0


UNKNOWN_DECISION = RateLimitDecision(current=-1, quota=-1, limited=False)


def is_limited(current: int, quota: int) -> bool:
    """A quota of 0 means unlimited; otherwise limited once usage exceeds it."""
    return quota > 0 and current > quota


def decide(current: int, quota: int) -> RateLimitDecision:
    """Build the decision for *current* usage against *quota*."""
    return RateLimitDecision(current=current, quota=quota, limited=is_limited(current, quota))


def is_approaching(decision: RateLimitDecision, ratio: float) -> bool:
    """Whether a not-yet-limited organization has used *ratio* of its quota."""
    if decision.limited or decision.quota <= 0:
        return False
    return decision.current >= decision.quota * ratio


@dataclass(frozen=True)
class OrganizationCacheEntry:
    """Cached rate-limit information for one organization."""

    org_name: str
    org_email: str
    operations: RateLimitDecision
    retention_days: int


def _freeze(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class Snapshot:
    """Immutable pair of lookup maps, published to the cache as one unit.

    Every organization reachable from ``targets`` has an entry in
    ``organizations``.
    """

    targets: Mapping[TargetId, OrganizationId] = field(default_factory=dict)
    organizations: Mapping[OrganizationId, OrganizationCacheEntry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        dangling = set(self.targets.values()) - set(self.organizations)
        if dangling:
            raise ValueError(f"Targets reference unknown organizations: {sorted(dangling)}")
        object.__setattr__(self, "targets", _freeze(self.targets))
        object.__setattr__(self, "organizations", _freeze(self.organizations))

    def organization_for(self, target_id: TargetId) -> OrganizationId | None:
        """Resolve the owning organization of *target_id*."""
        return self.targets.get(target_id)

    def entry_for(self, organization_id: OrganizationId) -> OrganizationCacheEntry | None:
        """Return the cached entry of *organization_id*."""
        return self.organizations.get(organization_id)


EMPTY_SNAPSHOT = Snapshot()
