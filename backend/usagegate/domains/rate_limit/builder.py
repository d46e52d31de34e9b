"""Snapshot builder: joins ownership with usage and decides who is limited.

One ``build()`` call is one refresh cycle's worth of work up to, but not
including, publication and dispatch:

1. compute the calendar-month window for ``now``;
2. fetch ownership records and usage estimates concurrently;
3. fold them into a target→organization map and per-organization entries,
   summing the usage of every target an organization owns;
4. compute the limited flag per organization and emit keyed notification
   requests for organizations that need one.

The builder holds no state between calls. Notification dedup relies on the
key being a pure function of (kind, organization, window, limit).
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from usagegate.core.logging import ContextualLogger
from usagegate.core.logging import logger as default_logger
from usagegate.domains.notifications.keys import notification_key
from usagegate.domains.notifications.types import (
    NotificationRequest,
    OrganizationContext,
    Period,
    RateLimitExceededTemplate,
    RateLimitWarningTemplate,
    TemplateKind,
)
from usagegate.domains.rate_limit.exceptions import SourceFetchError
from usagegate.domains.rate_limit.protocols import OwnershipStoreProtocol, UsageSourceProtocol
from usagegate.domains.rate_limit.types import (
    OrganizationCacheEntry,
    OrganizationId,
    OwnershipRecord,
    Snapshot,
    TargetId,
    UsageWindow,
    decide,
    is_approaching,
    usage_window_for,
)

OWNERSHIP_SOURCE = "ownership-store"
USAGE_SOURCE = "usage-source"


@dataclass(frozen=True)
class BuildResult:
    """Output of one build: the snapshot plus what to notify."""

    window: UsageWindow
    snapshot: Snapshot
    notifications: list[NotificationRequest] = field(default_factory=list)

    @property
    def limited_organizations(self) -> list[OrganizationId]:
        """Organizations whose decision is limited in this snapshot."""
        return [
            org_id
            for org_id, entry in self.snapshot.organizations.items()
            if entry.operations.limited
        ]


@dataclass
class _OrgAccumulator:
    org_name: str
    org_email: str
    quota: int
    retention_days: int
    current: int = 0


class SnapshotBuilder:
    """Builds a fresh snapshot and the notification requests for one cycle."""

    def __init__(
        self,
        ownership_store: OwnershipStoreProtocol,
        usage_source: UsageSourceProtocol,
        warning_ratio: Optional[float] = None,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        """Initialize the builder with its two read-only sources.

        Args:
            ownership_store: Source of target/organization/limit records.
            usage_source: Source of per-target operation counts.
            warning_ratio: When set, not-yet-limited organizations at or above
                this share of their quota get a warning notification.
            logger: Logger to use; defaults to the service logger.
        """
        self._ownership_store = ownership_store
        self._usage_source = usage_source
        self._warning_ratio = warning_ratio
        self._logger = (logger or default_logger).with_context(component="snapshot_builder")

    async def build(self, now: datetime) -> BuildResult:
        """Build the snapshot for the calendar month containing *now*.

        Raises:
            SourceFetchError: If either source failed; nothing is built.
        """
        window = usage_window_for(now)
        self._logger.info(
            f"Calculating rate-limit information based on window: {window.describe()}"
        )

        records, usage = await self._fetch(window)
        self._logger.debug(f"Fetched total of {len(records)} targets from the ownership store")
        self._logger.debug(f"Fetched total of {len(usage)} targets with usage information")

        snapshot = self._fold(records, usage)
        notifications = self._plan_notifications(snapshot, window)

        return BuildResult(window=window, snapshot=snapshot, notifications=notifications)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _fetch(
        self, window: UsageWindow
    ) -> tuple[list[OwnershipRecord], dict[TargetId, int]]:
        """Read both sources concurrently; either failure aborts the build."""
        results = await asyncio.gather(
            self._ownership_store.list_ownership_records(),
            self._usage_source.estimate(window.start_time, window.end_time),
            return_exceptions=True,
        )
        for source, outcome in zip((OWNERSHIP_SOURCE, USAGE_SOURCE), results):
            if isinstance(outcome, SourceFetchError):
                raise outcome
            if isinstance(outcome, Exception):
                raise SourceFetchError(source, f"Failed to fetch from {source}: {outcome}") from outcome
            if isinstance(outcome, BaseException):
                raise outcome

        records, usage = results
        return list(records), dict(usage)

    @staticmethod
    def _fold(records: list[OwnershipRecord], usage: dict[TargetId, int]) -> Snapshot:
        """Join records with usage into a snapshot.

        The first record seen for an organization supplies its name, email,
        quota and retention.
        """
        targets: dict[TargetId, OrganizationId] = {}
        accumulators: dict[OrganizationId, _OrgAccumulator] = {}

        for record in records:
            targets[record.target] = record.organization
            acc = accumulators.get(record.organization)
            if acc is None:
                acc = _OrgAccumulator(
                    org_name=record.org_name,
                    org_email=record.owner_email,
                    quota=record.monthly_limit,
                    retention_days=record.retention_days,
                )
                accumulators[record.organization] = acc
            acc.current += usage.get(record.target) or 0

        organizations = {
            org_id: OrganizationCacheEntry(
                org_name=acc.org_name,
                org_email=acc.org_email,
                operations=decide(acc.current, acc.quota),
                retention_days=acc.retention_days,
            )
            for org_id, acc in accumulators.items()
        }
        return Snapshot(targets=targets, organizations=organizations)

    def _plan_notifications(
        self, snapshot: Snapshot, window: UsageWindow
    ) -> list[NotificationRequest]:
        requests: list[NotificationRequest] = []

        for org_id, entry in snapshot.organizations.items():
            decision = entry.operations
            if decision.limited:
                self._logger.info(
                    f'Organization "{entry.org_name}"/"{org_id}" is now being rate-limited '
                    f"for operations ({decision.current}/{decision.quota})"
                )
                requests.append(
                    self._request(TemplateKind.RATE_LIMIT_EXCEEDED, org_id, entry, window)
                )
            elif self._warning_ratio is not None and is_approaching(decision, self._warning_ratio):
                self._logger.info(
                    f'Organization "{entry.org_name}"/"{org_id}" is approaching its operations '
                    f"limit ({decision.current}/{decision.quota})"
                )
                requests.append(
                    self._request(TemplateKind.RATE_LIMIT_WARNING, org_id, entry, window)
                )

        return requests

    @staticmethod
    def _request(
        kind: TemplateKind,
        org_id: OrganizationId,
        entry: OrganizationCacheEntry,
        window: UsageWindow,
    ) -> NotificationRequest:
        organization = OrganizationContext(
            id=org_id,
            name=entry.org_name,
            limit=entry.operations.quota,
            usage=entry.operations.current,
            period=Period(start=window.start_ms, end=window.end_ms),
        )
        if kind is TemplateKind.RATE_LIMIT_EXCEEDED:
            template = RateLimitExceededTemplate(organization=organization)
        else:
            template = RateLimitWarningTemplate(organization=organization)

        return NotificationRequest(
            key=notification_key(
                kind, org_id, window.start_ms, window.end_ms, entry.operations.quota
            ),
            recipient_email=entry.org_email,
            template=template,
        )
