"""Log query criteria."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from ..errors import InvalidCriteriaError
from ..logging_config import get_logger
from .assets import Asset
from .logs import epoch_seconds

logger = get_logger(__name__)


@dataclass(frozen=True)
class LogQueryCriteria:
    """Optional filters for a log query, combined with logical AND."""

    RECOGNIZED_KEYS: ClassVar[frozenset[str]] = frozenset(
        {"type", "timestamp", "status", "asset", "limit"}
    )

    type: str | None = None
    timestamp: int | None = None  # inclusive upper bound, epoch seconds
    status: str | None = None
    asset: int | None = None  # asset id; unsaved assets match nothing
    asset_given: bool = False  # True even when the asset id is None
    limit: int | None = None

    @classmethod
    def from_mapping(cls, criteria: Mapping[str, Any] | None = None) -> "LogQueryCriteria":
        """
        Parse a criteria mapping.

        Unrecognized keys are ignored with a warning. None values count as
        absent.

        Raises:
            InvalidCriteriaError: If a recognized key has an invalid value.
        """
        if not criteria:
            return cls()

        unknown = sorted(set(criteria) - cls.RECOGNIZED_KEYS)
        if unknown:
            logger.warning(
                "Ignoring unrecognized log query criteria: %s",
                ", ".join(unknown),
                extra={"context": {"keys": unknown}},
            )

        values = {key: criteria.get(key) for key in cls.RECOGNIZED_KEYS}

        asset_given = values["asset"] is not None
        return cls(
            type=_parse_string("type", values["type"]),
            timestamp=_parse_timestamp(values["timestamp"]),
            status=_parse_string("status", values["status"]),
            asset=_parse_asset(values["asset"]) if asset_given else None,
            asset_given=asset_given,
            limit=_parse_limit(values["limit"]),
        )


def _parse_string(key: str, value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidCriteriaError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def _parse_timestamp(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return epoch_seconds(value)
    except ValueError as e:
        raise InvalidCriteriaError(str(e)) from e


def _parse_asset(value: Any) -> int | None:
    if isinstance(value, Asset):
        return value.id
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidCriteriaError(
            f"'asset' must be an Asset or an asset id, got {type(value).__name__}"
        )
    return value


def _parse_limit(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidCriteriaError(f"'limit' must be an integer, got {type(value).__name__}")
    if value < 0:
        raise InvalidCriteriaError("'limit' must not be negative")
    return value
