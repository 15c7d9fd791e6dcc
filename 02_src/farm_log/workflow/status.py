"""Default initial status selection for new logs."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from ..errors import ConfigurationError
from ..logging_config import get_logger
from ..models import Log

logger = get_logger(__name__)


@dataclass(frozen=True)
class LogWorkflow:
    """Ordered set of statuses a log type moves through. The first is initial."""

    id: str
    label: str
    states: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.states:
            raise ConfigurationError(f"Workflow '{self.id}' has no states")

    @property
    def initial_state(self) -> str:
        """Status assigned to new logs using this workflow."""
        return self.states[0]


LOG_DEFAULT_WORKFLOW = LogWorkflow(
    id="log_default",
    label="Default",
    states=("pending", "done", "abandoned"),
)


class IStatusDefaulter(Protocol):
    """Assigns a default status to newly created logs."""

    def default_status(self, log_type: str) -> str | None:
        """Get the configured default status for a log type."""
        ...

    def apply(self, log: Log) -> Log:
        """Set the default status on a log without one."""
        ...


class StatusWorkflowDefaulter:
    """Per-type default status table."""

    def __init__(self, type_defaults: Mapping[str, str] | None = None):
        self._type_defaults = dict(type_defaults or {})

    @classmethod
    def from_workflows(
        cls,
        type_workflows: Mapping[str, LogWorkflow],
        overrides: Mapping[str, str] | None = None,
    ) -> "StatusWorkflowDefaulter":
        """
        Build the default table from per-type workflows.

        Args:
            type_workflows: Log type -> workflow. Defaults to each
                workflow's initial state.
            overrides: Log type -> explicit default status. Must be a state
                of that type's workflow, when the type has one.

        Raises:
            ConfigurationError: If an override is not a state of the workflow.
        """
        defaults = {
            log_type: workflow.initial_state
            for log_type, workflow in type_workflows.items()
        }

        for log_type, status in (overrides or {}).items():
            workflow = type_workflows.get(log_type)
            if workflow is not None and status not in workflow.states:
                raise ConfigurationError(
                    f"Default status '{status}' for log type '{log_type}' "
                    f"is not a state of workflow '{workflow.id}'"
                )
            defaults[log_type] = status

        return cls(defaults)

    @property
    def type_defaults(self) -> dict[str, str]:
        """Copy of the log type -> default status table."""
        return dict(self._type_defaults)

    def default_status(self, log_type: str) -> str | None:
        """Get the configured default status for a log type."""
        return self._type_defaults.get(log_type)

    def apply(self, log: Log) -> Log:
        """Set the default status on a log without one. Explicit statuses win."""
        if log.status is not None:
            return log

        status = self.default_status(log.type)
        if status is None:
            logger.debug("No default status configured for log type %s", log.type)
            return log

        log.status = status
        return log
