"""Log status workflow module."""

from .status import (
    LOG_DEFAULT_WORKFLOW,
    IStatusDefaulter,
    LogWorkflow,
    StatusWorkflowDefaulter,
)

__all__ = [
    "IStatusDefaulter",
    "LOG_DEFAULT_WORKFLOW",
    "LogWorkflow",
    "StatusWorkflowDefaulter",
]
