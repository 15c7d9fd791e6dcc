"""Log query factory: filtered, sorted queries over logs."""

from collections.abc import Mapping
from typing import Any, Protocol

from ..logging_config import get_logger
from ..models import LogQueryCriteria
from ..storage import EntityQuery, IStorage

logger = get_logger(__name__)


class ILogQueryFactory(Protocol):
    """Builds log queries from criteria."""

    def get_query(self, criteria: Mapping[str, Any] | None = None) -> EntityQuery:
        """Build an unexecuted log query."""
        ...

    async def build_query(
        self,
        criteria: Mapping[str, Any] | None = None,
        *,
        access_check: bool = True,
    ) -> list[int]:
        """Execute a log query and return ordered log IDs."""
        ...


class LogQueryFactory:
    """
    Log query factory.

    Results are ordered by timestamp descending, then by ID descending so
    logs sharing a timestamp come out newest-created first.

    Recognized criteria:
        type: Log type.
        timestamp: Upper bound; logs after it are excluded.
        status: Log status.
        asset: Asset (or asset ID) the logs must reference.
        limit: Maximum number of results.

    Unrecognized criteria are ignored.
    """

    def __init__(self, storage: IStorage):
        self._storage = storage

    def get_query(self, criteria: Mapping[str, Any] | None = None) -> EntityQuery:
        """Build an unexecuted log query. The caller sets the access mode."""
        parsed = LogQueryCriteria.from_mapping(criteria)
        query = self._storage.get_query("log")

        if parsed.type is not None:
            query.condition("type", parsed.type)
        if parsed.timestamp is not None:
            query.condition("timestamp", parsed.timestamp, "<=")
        if parsed.status is not None:
            query.condition("status", parsed.status)
        if parsed.asset_given:
            query.condition("asset", parsed.asset)

        query.sort("timestamp", "DESC")
        query.sort("id", "DESC")

        if parsed.limit is not None:
            query.range(0, parsed.limit)

        logger.debug(
            "Built log query",
            extra={"context": {"criteria": dict(criteria or {})}},
        )
        return query

    async def build_query(
        self,
        criteria: Mapping[str, Any] | None = None,
        *,
        access_check: bool = True,
    ) -> list[int]:
        """Execute a log query and return ordered log IDs."""
        return await self.get_query(criteria).access_check(access_check).execute()
