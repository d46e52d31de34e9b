"""Rate limit cache. Holds the published snapshot and answers lookups.

Readers take one reference to the current ``Snapshot`` and resolve
everything against it; ``publish()`` only ever replaces that reference.
A query racing a publish therefore sees either the old snapshot or the new
one, never a target map from one and an entry map from the other.
"""

from typing import Optional, Union

from usagegate.core.logging import ContextualLogger
from usagegate.core.logging import logger as default_logger
from usagegate.domains.rate_limit.types import (
    DEFAULT_RETENTION_DAYS,
    EMPTY_SNAPSHOT,
    UNKNOWN_DECISION,
    EntityKind,
    RateLimitDecision,
    Snapshot,
    TargetId,
)


class RateLimitCache:
    """Single-snapshot cache with atomic replacement."""

    def __init__(
        self,
        default_retention_days: int = DEFAULT_RETENTION_DAYS,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        """Initialize with an empty snapshot."""
        self._snapshot: Snapshot = EMPTY_SNAPSHOT
        self._default_retention_days = default_retention_days
        self._logger = (logger or default_logger).with_context(component="rate_limit_cache")

    @property
    def snapshot(self) -> Snapshot:
        """The currently published snapshot."""
        return self._snapshot

    def publish(self, snapshot: Snapshot) -> None:
        """Replace the published snapshot as one unit."""
        self._snapshot = snapshot

    def query(self, entity_id: str, entity_kind: Union[EntityKind, str]) -> RateLimitDecision:
        """Return the decision for an organization or a target.

        Unknown kinds, unknown ids and an empty cache all yield
        ``UNKNOWN_DECISION``; this never raises.
        """
        snapshot = self._snapshot

        try:
            kind = EntityKind(entity_kind)
        except ValueError:
            return UNKNOWN_DECISION

        if kind is EntityKind.ORGANIZATION:
            org_id = entity_id
        else:
            org_id = snapshot.organization_for(entity_id)

        if not org_id:
            self._logger.warning(
                f"Failed to resolve/find rate limit information for "
                f"entityId={entity_id} (type={kind.value})"
            )
            return UNKNOWN_DECISION

        entry = snapshot.entry_for(org_id)
        if entry is None:
            return UNKNOWN_DECISION
        return entry.operations

    def retention_for(self, target_id: TargetId) -> int:
        """Return the retention of the target's organization, or the default."""
        snapshot = self._snapshot

        org_id = snapshot.organization_for(target_id)
        if not org_id:
            return self._default_retention_days

        entry = snapshot.entry_for(org_id)
        if entry is None:
            return self._default_retention_days
        return entry.retention_days
