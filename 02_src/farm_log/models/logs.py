"""Log data models."""

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar

from .assets import Asset
from .text import TextLong


def epoch_seconds(value: Any) -> int:
    """
    Coerce a log timestamp to integer epoch seconds.

    Accepts an int or a timezone-aware datetime.

    Raises:
        ValueError: For naive datetimes and any other type (bool, float, str).
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            raise ValueError("'timestamp' datetime must be timezone-aware")
        return int(value.timestamp())
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(
            f"'timestamp' must be epoch seconds or a datetime, got {type(value).__name__}"
        )
    return value


@dataclass
class Log:
    """A timestamped farm activity record."""

    entity_type: ClassVar[str] = "log"

    type: str
    timestamp: int = field(default_factory=lambda: int(time.time()))  # epoch seconds
    status: str | None = None
    name: str = ""
    asset: list[int] = field(default_factory=list)  # referenced asset ids, ordered
    notes: TextLong | None = None
    id: int | None = None  # assigned on first save

    def add_asset(self, asset: Asset | int) -> None:
        """Reference an asset, ignoring duplicates."""
        asset_id = asset.id if isinstance(asset, Asset) else asset
        if asset_id is None:
            raise ValueError("Cannot reference an asset that has not been saved")
        if asset_id not in self.asset:
            self.asset.append(asset_id)

    def references(self, asset: Asset | int) -> bool:
        """Check whether this log references the asset."""
        asset_id = asset.id if isinstance(asset, Asset) else asset
        return asset_id in self.asset
