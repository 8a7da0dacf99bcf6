"""
worktrace: hierarchical execution-result tracking.

Records the outcome of nested units of work (commands, tasks, generators,
prompts) as a tree of result nodes. Each node follows the lifecycle
INITIALIZED -> WAITING -> SUCCESS | WARNING | FAILURE | ERROR, and every
parent reports the worst status found anywhere below it.

Example:
    from worktrace import ResultNode, ResultType, RenderOptions, track

    root = ResultNode.create(ResultType.COMMAND, "deploy")
    with track(root, ResultType.TASK, "build"):
        build()
    with track(root, ResultType.TASK, "notify", fatal=False):
        send_notification()
    root.mark_success()

    print(root.aggregate_status())
    print(root.render_text(RenderOptions(failures_only=True)))
"""

# Application layer (orchestration)
from worktrace.application import (
    ChildOperation,
    abort_pending,
    atrack,
    build_run_report,
    fan_out,
    track,
)

# Domain exceptions
from worktrace.domain.exceptions import (
    ConfigurationError,
    InvalidArgument,
    InvalidState,
    TrackingError,
)
from worktrace.domain.generator_status import GeneratorStatusTracker

# Domain interfaces (for custom stores)
from worktrace.domain.interfaces import ResultStoreInterface
from worktrace.domain.models import (
    ErrorInfo,
    RenderOptions,
    ResultSnapshot,
    ResultStatus,
    ResultSummary,
    ResultType,
    RunReport,
    StatusMessage,
    StatusMessageType,
    worst_status,
)
from worktrace.domain.result import ResultNode
from worktrace.domain.task_status import TaskStatusTracker

# Infrastructure (explicit import encouraged for dependency injection)
from worktrace.infrastructure.persistence import (
    FilesystemResultStore,
    InMemoryResultStore,
)

__version__ = "0.3.0"

__all__ = [
    # Version
    "__version__",
    # Domain models
    "ResultStatus",
    "ResultType",
    "ErrorInfo",
    "RenderOptions",
    "ResultSummary",
    "ResultSnapshot",
    "RunReport",
    "StatusMessage",
    "StatusMessageType",
    "worst_status",
    # Result tree and trackers
    "ResultNode",
    "TaskStatusTracker",
    "GeneratorStatusTracker",
    # Domain interfaces
    "ResultStoreInterface",
    # Domain exceptions
    "TrackingError",
    "InvalidArgument",
    "InvalidState",
    "ConfigurationError",
    # Application layer
    "track",
    "atrack",
    "abort_pending",
    "fan_out",
    "ChildOperation",
    "build_run_report",
    # Infrastructure - Persistence
    "InMemoryResultStore",
    "FilesystemResultStore",
]
