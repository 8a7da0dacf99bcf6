"""
Domain interfaces (Ports) for result tracking.

Abstract base classes that adapters implement. They carry no external
dependencies.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from worktrace.domain.models import ResultSnapshot
    from worktrace.domain.result import ResultNode


class ResultStoreInterface(ABC):
    """
    Port for persisting finished result trees for post-hoc rendering.

    Stores keep immutable snapshots, so later mutation of the live tree
    never changes what was saved.
    """

    @abstractmethod
    def save(self, run_id: str, node: "ResultNode") -> str:
        """
        Snapshot and store a result tree.

        Args:
            run_id: Identifier of the run (e.g. a command invocation)
            node: Root of the tree to store

        Returns:
            The run_id
        """
        pass

    @abstractmethod
    def load(self, run_id: str) -> "ResultSnapshot":
        """
        Retrieve a stored tree.

        Raises:
            KeyError: If no tree was stored under run_id
        """
        pass

    @abstractmethod
    def list_runs(self) -> list[str]:
        """Return stored run ids in sorted order."""
        pass
