"""
Persistence adapters for result trees.
"""

from worktrace.infrastructure.persistence.filesystem import FilesystemResultStore
from worktrace.infrastructure.persistence.memory import InMemoryResultStore

__all__ = [
    "InMemoryResultStore",
    "FilesystemResultStore",
]
