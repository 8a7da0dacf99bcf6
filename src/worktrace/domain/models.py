"""
Domain models for execution-result tracking.

Enumerations and immutable value objects shared by the result tree and
the status trackers. The mutable ResultNode lives in domain/result.py.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

# =============================================================================
# RESULT STATUS
# =============================================================================


class ResultStatus(str, Enum):
    """Lifecycle states a unit of work can occupy."""

    INITIALIZED = "INITIALIZED"
    WAITING = "WAITING"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    WARNING = "WARNING"
    ERROR = "ERROR"
    UNKNOWN = "UNKNOWN"  # Not yet classified, or corrupted

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def is_failing(self) -> bool:
        return self in FAILING_STATUSES

    @property
    def severity(self) -> int:
        """Rank used for worst-case aggregation (higher is worse)."""
        return _SEVERITY[self]

    @property
    def lifecycle_rank(self) -> int:
        """Position in INITIALIZED -> WAITING -> terminal. UNKNOWN ranks lowest."""
        if self is ResultStatus.UNKNOWN:
            return -1
        if self.is_terminal:
            return 2
        return 1 if self is ResultStatus.WAITING else 0


TERMINAL_STATUSES = frozenset(
    {
        ResultStatus.SUCCESS,
        ResultStatus.FAILURE,
        ResultStatus.WARNING,
        ResultStatus.ERROR,
    }
)

FAILING_STATUSES = frozenset({ResultStatus.FAILURE, ResultStatus.ERROR})

_SEVERITY = {
    ResultStatus.UNKNOWN: 0,
    ResultStatus.INITIALIZED: 1,
    ResultStatus.WAITING: 2,
    ResultStatus.SUCCESS: 3,
    ResultStatus.WARNING: 4,
    ResultStatus.FAILURE: 5,
    ResultStatus.ERROR: 6,
}


def worst_status(statuses: Iterable[ResultStatus]) -> ResultStatus:
    """Return the most severe status, or UNKNOWN when there are none."""
    return max(statuses, key=lambda s: s.severity, default=ResultStatus.UNKNOWN)


# =============================================================================
# RESULT TYPE
# =============================================================================


class ResultType(str, Enum):
    """Kind of unit of work that produced a result. Never used for control flow."""

    ACTION = "ACTION"
    COMMAND = "COMMAND"
    ENGINE = "ENGINE"
    EXECUTOR = "EXECUTOR"
    FUNCTION = "FUNCTION"
    GENERATOR = "GENERATOR"
    INITIALIZER = "INITIALIZER"
    INTERVIEW = "INTERVIEW"
    PROMPT = "PROMPT"
    RECIPE = "RECIPE"
    TASK = "TASK"
    TASKBUNDLE = "TASKBUNDLE"
    UTILITY = "UTILITY"
    WORKER = "WORKER"
    UNKNOWN = "UNKNOWN"


# =============================================================================
# ERROR PAYLOAD
# =============================================================================


@dataclass(frozen=True)
class ErrorInfo:
    """Structured wrapper around the cause of a FAILURE or ERROR."""

    message: str
    cause: Any = None  # Native exception or structured payload, opaque here
    error_type: str = ""

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorInfo":
        return cls(
            message=str(exc) or type(exc).__name__,
            cause=exc,
            error_type=type(exc).__name__,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "error_type": self.error_type,
            "cause": None if self.cause is None else str(self.cause),
        }


@dataclass(frozen=True)
class StatusOverride:
    """Audit record of a forced status transition."""

    previous: ResultStatus
    new: ResultStatus
    reason: str
    at: datetime


# =============================================================================
# RENDERING AND SUMMARIES
# =============================================================================


@dataclass(frozen=True)
class RenderOptions:
    """Verbosity switches for render_tree / render_text."""

    include_detail: bool = False
    include_timings: bool = False
    failures_only: bool = False


@dataclass(frozen=True)
class ResultSummary:
    """Aggregate snapshot of a single node and its direct children."""

    status: ResultStatus
    result_type: ResultType
    name: str
    duration_ms: int
    child_count: int
    failed_child_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "type": self.result_type.value,
            "name": self.name,
            "duration_ms": self.duration_ms,
            "child_count": self.child_count,
            "failed_child_count": self.failed_child_count,
        }


@dataclass(frozen=True)
class ResultSnapshot:
    """Immutable copy of a result subtree, detached from the live nodes."""

    name: str
    result_type: ResultType
    status: ResultStatus
    aggregate_status: ResultStatus
    children: tuple["ResultSnapshot", ...] = ()
    detail: Any = None
    error_message: str | None = None
    error_type: str | None = None
    start_time: str | None = None  # ISO 8601
    end_time: str | None = None
    duration_ms: int | None = None

    def walk(self) -> Iterator["ResultSnapshot"]:
        yield self
        for child in self.children:
            yield from child.walk()

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.walk())


# =============================================================================
# STATUS TRACKER MESSAGES
# =============================================================================


@dataclass(frozen=True)
class TimedMessage:
    """Single entry in a task status log."""

    timestamp: datetime
    message: str


class StatusMessageType(str, Enum):
    """Kinds of generator status messages."""

    ERROR = "error"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    FATAL = "fatal"


_FAILURE_MESSAGE_TYPES = frozenset({StatusMessageType.ERROR, StatusMessageType.FATAL})


@dataclass(frozen=True)
class StatusMessage:
    """One entry in an end-of-run status report."""

    message: str
    is_failure: bool = False
    title: str = ""
    message_type: StatusMessageType = StatusMessageType.INFO

    def __post_init__(self) -> None:
        # error/fatal messages always count as failures
        if self.message_type in _FAILURE_MESSAGE_TYPES and not self.is_failure:
            object.__setattr__(self, "is_failure", True)


@dataclass(frozen=True)
class RunReport:
    """End-of-run report combining the result tree and generator messages."""

    summary: ResultSummary
    aggregate_status: ResultStatus
    first_failure_path: tuple[str, ...] | None
    errors: tuple[tuple[tuple[str, ...], str], ...] = ()
    messages: tuple[StatusMessage, ...] = ()
    exit_code: int = 0
