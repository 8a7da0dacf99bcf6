"""
In-memory implementation of the result store.

Useful for testing and for runs that only render at the end.
"""

from worktrace.domain.interfaces import ResultStoreInterface
from worktrace.domain.models import ResultSnapshot
from worktrace.domain.result import ResultNode


class InMemoryResultStore(ResultStoreInterface):
    """Simple in-memory store for testing."""

    def __init__(self) -> None:
        self._runs: dict[str, ResultSnapshot] = {}

    def save(self, run_id: str, node: ResultNode) -> str:
        self._runs[run_id] = node.snapshot()
        return run_id

    def load(self, run_id: str) -> ResultSnapshot:
        if run_id not in self._runs:
            raise KeyError(f"Run not found: {run_id}")
        return self._runs[run_id]

    def list_runs(self) -> list[str]:
        return sorted(self._runs)
