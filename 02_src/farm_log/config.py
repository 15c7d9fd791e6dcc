"""Project-level configuration and path helpers."""

import json
from pathlib import Path
from typing import Union

from .errors import ConfigurationError

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "farm_log.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

# Log types shipped with the base install.
DEFAULT_LOG_TYPES = (
    "activity",
    "harvest",
    "input",
    "lab_test",
    "maintenance",
    "medical",
    "observation",
    "seeding",
    "transplanting",
)


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def resolve_status_defaults(env_value: str | None = None) -> dict[str, str] | None:
    """
    Parse LOG_STATUS_DEFAULTS into a log type -> status mapping.

    Args:
        env_value: JSON object, e.g. '{"observation": "done"}'.

    Returns:
        The mapping, or None when the variable is unset so the caller
        falls back to the workflow defaults.

    Raises:
        ConfigurationError: If the value is not a JSON object of strings.
    """
    if not env_value:
        return None

    try:
        parsed = json.loads(env_value)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"LOG_STATUS_DEFAULTS is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise ConfigurationError("LOG_STATUS_DEFAULTS must be a JSON object")

    for log_type, status in parsed.items():
        if not isinstance(status, str) or not status:
            raise ConfigurationError(
                f"Default status for log type '{log_type}' must be a non-empty string"
            )

    return parsed
