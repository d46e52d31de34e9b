"""PostgreSQL ownership store.

One read per refresh cycle: every target joined through its project to the
owning organization and that organization's owner user.
"""

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from usagegate.core.logging import logger
from usagegate.domains.rate_limit.exceptions import SourceFetchError
from usagegate.domains.rate_limit.protocols import OwnershipStoreProtocol
from usagegate.domains.rate_limit.types import OwnershipRecord

SOURCE_NAME = "ownership-store"

OWNERSHIP_QUERY = text(
    """
    SELECT
        t.id AS target,
        o.id AS organization,
        o.name AS org_name,
        u.email AS owner_email,
        o.limit_operations_monthly,
        o.limit_retention_days
    FROM targets AS t
    INNER JOIN projects AS p ON p.id = t.project_id
    INNER JOIN organizations AS o ON o.id = p.org_id
    INNER JOIN users AS u ON u.id = o.user_id
    ORDER BY o.id, t.id
    """
)


def create_engine(url: str) -> AsyncEngine:
    """Create the async engine used by the ownership store."""
    return create_async_engine(
        url,
        pool_size=2,
        max_overflow=0,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_timeout=30,
        connect_args={"command_timeout": 60},
    )


class PostgresOwnershipStore(OwnershipStoreProtocol):
    """Reads ownership records with a single SQL statement."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def list_ownership_records(self) -> list[OwnershipRecord]:
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(OWNERSHIP_QUERY)
                rows = result.mappings().all()
        except SQLAlchemyError as e:
            raise SourceFetchError(SOURCE_NAME, f"Failed to read ownership records: {e}") from e

        logger.debug(f"Read {len(rows)} ownership rows from PostgreSQL")
        return [
            OwnershipRecord(
                target=str(row["target"]),
                organization=str(row["organization"]),
                org_name=row["org_name"],
                owner_email=row["owner_email"],
                monthly_limit=int(row["limit_operations_monthly"]),
                retention_days=int(row["limit_retention_days"]),
            )
            for row in rows
        ]

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self._engine.dispose()
