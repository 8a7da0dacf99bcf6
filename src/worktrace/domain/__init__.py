"""
Domain layer: the result tracking model.

Pure data structures and state machines with no I/O and no dependency on
the application or infrastructure layers.
"""

from worktrace.domain.exceptions import (
    ConfigurationError,
    InvalidArgument,
    InvalidState,
    TrackingError,
)
from worktrace.domain.generator_status import GeneratorStatusTracker
from worktrace.domain.interfaces import ResultStoreInterface
from worktrace.domain.models import (
    FAILING_STATUSES,
    TERMINAL_STATUSES,
    ErrorInfo,
    RenderOptions,
    ResultSnapshot,
    ResultStatus,
    ResultSummary,
    ResultType,
    RunReport,
    StatusMessage,
    StatusMessageType,
    StatusOverride,
    TimedMessage,
    worst_status,
)
from worktrace.domain.result import ResultNode
from worktrace.domain.task_status import TaskStatusTracker

__all__ = [
    # Models
    "ResultStatus",
    "ResultType",
    "TERMINAL_STATUSES",
    "FAILING_STATUSES",
    "worst_status",
    "ErrorInfo",
    "StatusOverride",
    "RenderOptions",
    "ResultSummary",
    "ResultSnapshot",
    "RunReport",
    "TimedMessage",
    "StatusMessage",
    "StatusMessageType",
    # Result tree
    "ResultNode",
    # Trackers
    "TaskStatusTracker",
    "GeneratorStatusTracker",
    # Ports
    "ResultStoreInterface",
    # Exceptions
    "TrackingError",
    "InvalidArgument",
    "InvalidState",
    "ConfigurationError",
]
