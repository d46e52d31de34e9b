"""In-memory ownership store used when no database is configured."""

from typing import Iterable, Optional

from usagegate.domains.rate_limit.protocols import OwnershipStoreProtocol
from usagegate.domains.rate_limit.types import OwnershipRecord


class InMemoryOwnershipStore(OwnershipStoreProtocol):
    """Serves a replaceable list of records.

    Usage:
        store = InMemoryOwnershipStore()
        store.replace([OwnershipRecord(...), ...])
    """

    def __init__(self, records: Optional[Iterable[OwnershipRecord]] = None) -> None:
        self._records: tuple[OwnershipRecord, ...] = tuple(records or ())

    def replace(self, records: Iterable[OwnershipRecord]) -> None:
        """Swap the served records for the next read."""
        self._records = tuple(records)

    async def list_ownership_records(self) -> list[OwnershipRecord]:
        return list(self._records)
