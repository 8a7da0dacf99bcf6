"""
Result nodes: the hierarchical record of nested units of work.

A ResultNode is created when a unit of work begins, moves to WAITING when
asynchronous work is dispatched, and reaches a terminal status when that
work resolves. Nodes form a tree: every child is owned by exactly one
parent, and the parent link is a weak reference used only for navigation.

Aggregate status is never stored. It is recomputed from the children on
every read, so a parent always reflects its worst-behaved descendant
without explicit propagation calls.

The model is not thread-safe. Mutate a node from one logical owner at a
time (see application/fan_out.py for the fan-out/fan-in discipline).
"""

import logging
import weakref
from collections.abc import Iterator, Mapping
from datetime import datetime, timezone
from typing import Any

from worktrace.domain.exceptions import InvalidArgument, InvalidState
from worktrace.domain.models import (
    ErrorInfo,
    RenderOptions,
    ResultSnapshot,
    ResultStatus,
    ResultSummary,
    ResultType,
    StatusOverride,
    worst_status,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# INPUT COERCION
# =============================================================================


def coerce_status(status: ResultStatus | str) -> ResultStatus:
    """Accept a ResultStatus or its exact string value."""
    if isinstance(status, ResultStatus):
        return status
    try:
        return ResultStatus(status)
    except (ValueError, TypeError) as e:
        raise InvalidArgument(f"Unrecognized result status: {status!r}") from e


def coerce_type(result_type: ResultType | str) -> ResultType:
    """Accept a ResultType or its exact string value."""
    if isinstance(result_type, ResultType):
        return result_type
    try:
        return ResultType(result_type)
    except (ValueError, TypeError) as e:
        raise InvalidArgument(f"Unrecognized result type: {result_type!r}") from e


def coerce_error(payload: Any) -> ErrorInfo:
    """
    Normalize an error payload into an ErrorInfo.

    Args:
        payload: ErrorInfo, exception, message string, or a mapping with a
            "message" key and optional "cause" / "error_type" keys

    Returns:
        The wrapped error

    Raises:
        InvalidArgument: If the payload has an unsupported shape or an
            empty message
    """
    if isinstance(payload, ErrorInfo):
        info = payload
    elif isinstance(payload, BaseException):
        info = ErrorInfo.from_exception(payload)
    elif isinstance(payload, str):
        info = ErrorInfo(message=payload)
    elif isinstance(payload, Mapping):
        message = payload.get("message")
        if not isinstance(message, str):
            raise InvalidArgument("Error payload mapping needs a string 'message'")
        info = ErrorInfo(
            message=message,
            cause=payload.get("cause"),
            error_type=str(payload.get("error_type", "")),
        )
    else:
        raise InvalidArgument(
            f"Unsupported error payload type: {type(payload).__name__}"
        )

    if not isinstance(info.message, str) or not info.message.strip():
        raise InvalidArgument("Error payload must carry a non-empty message")
    return info


def format_duration(total_ms: int) -> str:
    """Format milliseconds as MM:SS, or H:MM:SS past one hour."""
    seconds = max(total_ms, 0) // 1000
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


# =============================================================================
# RESULT NODE
# =============================================================================


class ResultNode:
    """
    One tracked unit-of-work outcome.

    Create roots with ResultNode.create() and children with add_child().
    Status transitions go through set_status() (or the mark_* helpers),
    which enforces the lifecycle INITIALIZED -> WAITING -> terminal.
    """

    def __init__(
        self,
        result_type: ResultType | str,
        name: str,
        detail: Any = None,
    ) -> None:
        """
        Args:
            result_type: Kind of unit of work (enum member or exact string)
            name: Human-readable label, must be non-empty
            detail: Optional caller-supplied context (e.g. input options)

        Raises:
            InvalidArgument: If name is empty or result_type is unknown
        """
        resolved_type = coerce_type(result_type)
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgument("Result name must be a non-empty string")

        self._result_type = resolved_type
        self._name = name
        self._detail = detail
        self._detail_set = detail is not None
        self._status = ResultStatus.INITIALIZED
        self._start_time = _now()
        self._end_time: datetime | None = None
        self._error: ErrorInfo | None = None
        self._children: list[ResultNode] = []
        self._parent_ref: weakref.ref[ResultNode] | None = None
        self._overrides: list[StatusOverride] = []
        logger.debug("Initialized %s result '%s'", resolved_type.value, name)

    @classmethod
    def create(
        cls,
        result_type: ResultType | str,
        name: str,
        detail: Any = None,
    ) -> "ResultNode":
        """Create a root node in status INITIALIZED, started now."""
        return cls(result_type, name, detail)

    @classmethod
    def wrap(
        cls,
        value: Any,
        result_type: ResultType | str = ResultType.UNKNOWN,
        name: str = "wrapped",
    ) -> "ResultNode":
        """
        Wrap an arbitrary outcome as a finished root node.

        Existing nodes are returned unchanged, exceptions become ERROR
        nodes, and any other value becomes the detail of a SUCCESS node.
        """
        if isinstance(value, ResultNode):
            return value
        if isinstance(value, BaseException):
            return cls.wrap_error(value, result_type, name)
        node = cls(result_type, name, detail=value)
        node.mark_success()
        return node

    @classmethod
    def wrap_error(
        cls,
        exc: BaseException,
        result_type: ResultType | str = ResultType.UNKNOWN,
        name: str | None = None,
    ) -> "ResultNode":
        """Wrap an exception as a root node in status ERROR."""
        if not isinstance(exc, BaseException):
            raise InvalidArgument(
                f"wrap_error expects an exception, got {type(exc).__name__}"
            )
        node = cls(result_type, name or type(exc).__name__)
        node.mark_error(exc)
        return node

    def __repr__(self) -> str:
        return (
            f"ResultNode(type={self._result_type.value}, name={self._name!r}, "
            f"status={self._status.value}, children={len(self._children)})"
        )

    # -------------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------------

    @property
    def result_type(self) -> ResultType:
        return self._result_type

    @property
    def name(self) -> str:
        return self._name

    @property
    def detail(self) -> Any:
        return self._detail

    @property
    def status(self) -> ResultStatus:
        return self._status

    @property
    def is_terminal(self) -> bool:
        return self._status.is_terminal

    @property
    def start_time(self) -> datetime:
        return self._start_time

    @property
    def end_time(self) -> datetime | None:
        return self._end_time

    @property
    def error(self) -> ErrorInfo | None:
        return self._error

    @property
    def children(self) -> tuple["ResultNode", ...]:
        return tuple(self._children)

    @property
    def parent(self) -> "ResultNode | None":
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def overrides(self) -> tuple[StatusOverride, ...]:
        return tuple(self._overrides)

    def set_detail(self, detail: Any) -> None:
        """Set the detail payload. It can only be set once."""
        if self._detail_set:
            raise InvalidState(
                f"Detail of result '{self._name}' is already set", self._name
            )
        self._detail = detail
        self._detail_set = True

    # -------------------------------------------------------------------------
    # Tree construction
    # -------------------------------------------------------------------------

    def _require_open(self, action: str) -> None:
        if self._status.is_terminal:
            raise InvalidState(
                f"Cannot {action} result '{self._name}': "
                f"it is already {self._status.value}",
                self._name,
            )

    def _attach(self, child: "ResultNode") -> None:
        child._parent_ref = weakref.ref(self)
        self._children.append(child)

    def add_child(
        self,
        result_type: ResultType | str,
        name: str,
        detail: Any = None,
    ) -> "ResultNode":
        """
        Create a child node, append it in call order, and return it.

        Raises:
            InvalidState: If this node is already terminal
            InvalidArgument: If name or result_type is invalid
        """
        self._require_open("add a child to")
        child = ResultNode(result_type, name, detail)
        self._attach(child)
        return child

    def adopt(self, child: "ResultNode") -> "ResultNode":
        """
        Attach an existing root node (e.g. one built by wrap()) as a child.

        Raises:
            InvalidArgument: If child is not a ResultNode
            InvalidState: If this node is terminal, the child already has a
                parent, or the child is this node or one of its ancestors
        """
        if not isinstance(child, ResultNode):
            raise InvalidArgument(f"Cannot adopt {type(child).__name__}")
        self._require_open("adopt a child into")
        existing_parent = child.parent
        if existing_parent is not None:
            raise InvalidState(
                f"Result '{child.name}' already belongs to '{existing_parent.name}'",
                child.name,
            )
        if child is self or any(a is child for a in self.ancestors()):
            raise InvalidState(
                f"Adopting '{child.name}' into '{self._name}' would create a cycle",
                child.name,
            )
        self._attach(child)
        return child

    def remove_child(self, child: "ResultNode") -> None:
        """Detach a direct child. Its whole subtree goes with it."""
        self._require_open("remove a child from")
        for index, candidate in enumerate(self._children):
            if candidate is child:
                del self._children[index]
                child._parent_ref = None
                return
        raise InvalidState(
            f"Result '{child.name}' is not a child of '{self._name}'", child.name
        )

    # -------------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------------

    def set_status(
        self,
        status: ResultStatus | str,
        error: Any = None,
        *,
        force: bool = False,
        reason: str = "",
    ) -> None:
        """
        Transition this node's status.

        Args:
            status: Target status (enum member or exact string)
            error: Error payload, required for FAILURE/ERROR and rejected
                for every other status
            force: Allow leaving a terminal status or moving backwards.
                Every forced override is recorded in `overrides`.
            reason: Free text stored with a forced override

        Raises:
            InvalidArgument: Unknown status, or missing/unexpected error payload
            InvalidState: Terminal or backwards transition without force

        The node is left unchanged whenever an exception is raised.
        """
        target = coerce_status(status)

        current = self._status
        overriding = False
        if current.is_terminal:
            if not force:
                raise InvalidState(
                    f"Result '{self._name}' is already {current.value}; "
                    "pass force=True to override",
                    self._name,
                )
            overriding = True
        elif target.lifecycle_rank < current.lifecycle_rank:
            if not force:
                raise InvalidState(
                    f"Result '{self._name}' cannot move back from "
                    f"{current.value} to {target.value} without force",
                    self._name,
                )
            overriding = True

        info: ErrorInfo | None = None
        if target.is_failing:
            if error is None:
                raise InvalidArgument(
                    f"Transition of '{self._name}' to {target.value} "
                    "requires an error payload"
                )
            info = coerce_error(error)
        elif error is not None:
            raise InvalidArgument(
                f"An error payload is only accepted with FAILURE or ERROR, "
                f"not {target.value}"
            )

        now = _now()
        if overriding:
            self._overrides.append(
                StatusOverride(previous=current, new=target, reason=reason, at=now)
            )
            logger.warning(
                "Forced status override on '%s': %s -> %s (%s)",
                self._name,
                current.value,
                target.value,
                reason or "no reason given",
            )

        self._status = target
        self._error = info
        if target.is_terminal:
            self._end_time = max(now, self._start_time)
        else:
            self._end_time = None
        logger.debug("Result '%s': %s -> %s", self._name, current.value, target.value)

    def mark_waiting(self) -> None:
        self.set_status(ResultStatus.WAITING)

    def mark_success(self) -> None:
        self.set_status(ResultStatus.SUCCESS)

    def mark_warning(self) -> None:
        self.set_status(ResultStatus.WARNING)

    def mark_failure(self, error: Any) -> None:
        self.set_status(ResultStatus.FAILURE, error)

    def mark_error(self, error: Any) -> None:
        self.set_status(ResultStatus.ERROR, error)

    # -------------------------------------------------------------------------
    # Aggregation and traversal
    # -------------------------------------------------------------------------

    def aggregate_status(self) -> ResultStatus:
        """
        Worst-case status across this node and its descendants.

        A node that is itself FAILURE or ERROR reports its own status.
        Otherwise the worst of its own status and every child's aggregate
        wins, using ERROR > FAILURE > WARNING > SUCCESS > WAITING >
        INITIALIZED > UNKNOWN.
        """
        if self._status.is_failing or not self._children:
            return self._status
        return worst_status(
            [self._status, *(child.aggregate_status() for child in self._children)]
        )

    def walk(self) -> Iterator["ResultNode"]:
        """Pre-order, insertion-ordered traversal of this subtree."""
        stack: list[ResultNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def ancestors(self) -> Iterator["ResultNode"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    @property
    def root(self) -> "ResultNode":
        node = self
        for node in self.ancestors():
            pass
        return node

    @property
    def depth(self) -> int:
        return sum(1 for _ in self.ancestors())

    @property
    def path(self) -> tuple[str, ...]:
        """Names from the root down to this node."""
        names = [a.name for a in self.ancestors()]
        names.reverse()
        names.append(self._name)
        return tuple(names)

    def find_first_failure(self) -> "ResultNode | None":
        """First node (pre-order) whose own status is FAILURE or ERROR."""
        return next((n for n in self.walk() if n.status.is_failing), None)

    def collect_errors(self) -> list[tuple["ResultNode", ErrorInfo]]:
        """Every failing node with its wrapped error, in tree order."""
        return [
            (node, node.error)
            for node in self.walk()
            if node.status.is_failing and node.error is not None
        ]

    # -------------------------------------------------------------------------
    # Timing
    # -------------------------------------------------------------------------

    @property
    def duration_ms(self) -> int:
        """Elapsed milliseconds, measured up to now while still running."""
        end = self._end_time or _now()
        return max(int((end - self._start_time).total_seconds() * 1000), 0)

    @property
    def duration_string(self) -> str:
        return format_duration(self.duration_ms)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _visible_children(self, options: RenderOptions) -> list["ResultNode"]:
        if options.failures_only:
            return [c for c in self._children if c.aggregate_status().is_failing]
        return list(self._children)

    def render_tree(self, options: RenderOptions | None = None) -> dict[str, Any]:
        """
        Render this subtree as nested mappings, depth-first in insertion order.

        Pure function of current state. With failures_only, children whose
        subtree holds no FAILURE/ERROR node are dropped; this node is
        always rendered.
        """
        return self._render(options or RenderOptions())

    def _render(self, options: RenderOptions) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self._name,
            "type": self._result_type.value,
            "status": self._status.value,
            "aggregate_status": self.aggregate_status().value,
        }
        if self._error is not None:
            data["error"] = self._error.to_dict()
        if options.include_detail:
            data["detail"] = self._detail
        if options.include_timings:
            data["start_time"] = self._start_time.isoformat()
            data["end_time"] = self._end_time.isoformat() if self._end_time else None
            data["duration_ms"] = self.duration_ms
        data["children"] = [c._render(options) for c in self._visible_children(options)]
        return data

    def render_text(self, options: RenderOptions | None = None) -> str:
        """Render this subtree as indented text, one node per line."""
        lines: list[str] = []
        self._render_lines(options or RenderOptions(), 0, lines)
        return "\n".join(lines)

    def _render_lines(
        self, options: RenderOptions, depth: int, lines: list[str]
    ) -> None:
        line = f"{'  ' * depth}{self._name} [{self._result_type.value}] {self._status.value}"
        aggregate = self.aggregate_status()
        if aggregate is not self._status:
            line += f" (aggregate {aggregate.value})"
        if options.include_timings:
            line += f" [{self.duration_string}]"
        if self._error is not None:
            line += f" - {self._error.message}"
        if options.include_detail and self._detail is not None:
            line += f" {self._detail!r}"
        lines.append(line)
        for child in self._visible_children(options):
            child._render_lines(options, depth + 1, lines)

    def to_summary(self) -> ResultSummary:
        return ResultSummary(
            status=self._status,
            result_type=self._result_type,
            name=self._name,
            duration_ms=self.duration_ms,
            child_count=len(self._children),
            failed_child_count=sum(
                1 for c in self._children if c.status.is_failing
            ),
        )

    def snapshot(self) -> ResultSnapshot:
        """Immutable copy of this subtree with full detail and timings."""
        return ResultSnapshot(
            name=self._name,
            result_type=self._result_type,
            status=self._status,
            aggregate_status=self.aggregate_status(),
            children=tuple(c.snapshot() for c in self._children),
            detail=self._detail,
            error_message=self._error.message if self._error else None,
            error_type=self._error.error_type if self._error else None,
            start_time=self._start_time.isoformat(),
            end_time=self._end_time.isoformat() if self._end_time else None,
            duration_ms=self.duration_ms,
        )
