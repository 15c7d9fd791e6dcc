"""Lookup of the logs that reference an asset."""

from typing import Protocol

from ..logging_config import get_logger
from ..models import Asset, Log
from ..query import ILogQueryFactory
from ..storage import IStorage

logger = get_logger(__name__)


class IAssetLogs(Protocol):
    """Logs referencing an asset, most recent first."""

    async def get_logs(
        self,
        asset: Asset | int,
        log_type: str | None = None,
        *,
        access_check: bool = True,
    ) -> list[Log]:
        """Get logs that reference an asset, optionally of one type."""
        ...

    async def get_first_log(
        self, asset: Asset | int, *, access_check: bool = True
    ) -> Log | None:
        """Get the most recent log that references an asset."""
        ...


class AssetLogs:
    """Asset logs service backed by the log query factory."""

    def __init__(self, storage: IStorage, log_query_factory: ILogQueryFactory):
        self._storage = storage
        self._log_query_factory = log_query_factory

    async def get_logs(
        self,
        asset: Asset | int,
        log_type: str | None = None,
        *,
        access_check: bool = True,
    ) -> list[Log]:
        """Get logs that reference an asset, optionally of one type."""
        log_ids = await self._log_query_factory.build_query(
            {"asset": asset, "type": log_type},
            access_check=access_check,
        )
        logger.debug(
            "Found %d logs for asset",
            len(log_ids),
            extra={"entity_type": "asset", "entity_id": _asset_id(asset)},
        )
        return await self._storage.load_multiple("log", log_ids)

    async def get_first_log(
        self, asset: Asset | int, *, access_check: bool = True
    ) -> Log | None:
        """
        Get the most recent log that references an asset.

        "First" follows the log query order (timestamp descending), so this
        is the latest log, not the chronologically earliest one.
        """
        log_ids = await self._log_query_factory.build_query(
            {"asset": asset, "limit": 1},
            access_check=access_check,
        )
        if not log_ids:
            return None
        return await self._storage.load("log", log_ids[0])


def _asset_id(asset: Asset | int) -> int | None:
    return asset.id if isinstance(asset, Asset) else asset
