"""
Context managers that tie a unit of work to a child result node.

A failing child never fails its parent on its own. The caller chooses per
sub-task whether a failure is fatal (re-raised, so the caller's own
handling decides the parent's fate) or best-effort (recorded on the child
and suppressed).
"""

import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from typing import Any

from worktrace.domain.models import ErrorInfo, ResultStatus, ResultType
from worktrace.domain.result import ResultNode

logger = logging.getLogger(__name__)


def _settle(child: ResultNode, exc: BaseException | None) -> None:
    if child.is_terminal:
        return
    if exc is None:
        child.mark_success()
    else:
        child.mark_error(exc)


@contextmanager
def track(
    parent: ResultNode,
    result_type: ResultType | str,
    name: str,
    detail: Any = None,
    *,
    fatal: bool = True,
) -> Iterator[ResultNode]:
    """
    Run a block of work as a fresh child of `parent`.

    On normal exit the child becomes SUCCESS unless the block already set a
    terminal status. On an exception it becomes ERROR carrying the
    exception; the exception is re-raised when `fatal`, otherwise it is
    logged and suppressed.

    Example:
        with track(root, ResultType.TASK, "validate") as step:
            step.set_detail({"files": 12})
            run_validation()
    """
    child = parent.add_child(result_type, name, detail)
    try:
        yield child
    except Exception as exc:
        _settle(child, exc)
        if fatal:
            raise
        logger.info("Best-effort step '%s' failed: %s", name, exc)
    else:
        _settle(child, None)


@asynccontextmanager
async def atrack(
    parent: ResultNode,
    result_type: ResultType | str,
    name: str,
    detail: Any = None,
    *,
    fatal: bool = True,
) -> AsyncIterator[ResultNode]:
    """Async counterpart of track(); the child is WAITING while the block runs."""
    child = parent.add_child(result_type, name, detail)
    child.mark_waiting()
    try:
        yield child
    except Exception as exc:
        _settle(child, exc)
        if fatal:
            raise
        logger.info("Best-effort step '%s' failed: %s", name, exc)
    else:
        _settle(child, None)


def abort_pending(node: ResultNode, reason: str) -> list[ResultNode]:
    """
    Move every non-terminal node in a subtree to ERROR.

    Children are settled before their parents. Use after externally
    cancelling the underlying operations; nothing here cancels work.

    Returns:
        The nodes that were aborted, in the order they were settled
    """
    error = ErrorInfo(message=f"aborted: {reason}", error_type="Aborted")
    pending = [n for n in node.walk() if not n.is_terminal]
    aborted: list[ResultNode] = []
    for pending_node in reversed(pending):
        pending_node.set_status(ResultStatus.ERROR, error)
        aborted.append(pending_node)
    if aborted:
        logger.warning("Aborted %d pending result(s) under '%s'", len(aborted), node.name)
    return aborted
