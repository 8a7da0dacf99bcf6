"""
Fan-out/fan-in of concurrent child operations.

The parent creates every child on the calling task before anything runs.
Each concurrent operation then mutates only its own child, and the parent
is read again only after all operations are joined. Under that discipline
no locking is needed.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from worktrace.domain.models import ResultType
from worktrace.domain.result import ResultNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChildOperation:
    """One unit of concurrent work and the child result it owns."""

    result_type: ResultType | str
    name: str
    run: Callable[[ResultNode], Awaitable[Any]]
    detail: Any = None


async def _run_child(operation: ChildOperation, child: ResultNode) -> Any:
    try:
        value = await operation.run(child)
    except Exception as exc:
        if not child.is_terminal:
            child.mark_error(exc)
        raise
    if not child.is_terminal:
        child.mark_success()
    return value


async def fan_out(
    parent: ResultNode,
    operations: Sequence[ChildOperation],
    *,
    fail_fast: bool = False,
) -> list[Any]:
    """
    Run operations concurrently, one child result each.

    Args:
        parent: Node that receives one child per operation, in order
        operations: Work to dispatch
        fail_fast: Re-raise the first exception once every child settled

    Returns:
        One entry per operation, in operation order. Failed operations
        leave their exception in place of a value.
    """
    # Build every child before attaching any, so a malformed operation
    # leaves the parent untouched
    children = [ResultNode(op.result_type, op.name, op.detail) for op in operations]
    for child in children:
        parent.adopt(child)
    for child in children:
        child.mark_waiting()

    outcomes = await asyncio.gather(
        *(_run_child(op, child) for op, child in zip(operations, children)),
        return_exceptions=True,
    )

    failures = [o for o in outcomes if isinstance(o, BaseException)]
    logger.debug(
        "Fan-out under '%s' joined: %d ok, %d failed",
        parent.name,
        len(outcomes) - len(failures),
        len(failures),
    )
    if fail_fast and failures:
        raise failures[0]
    return list(outcomes)
