"""
Infrastructure layer for result tracking.

Adapters for external concerns: persistence, serialization, console
rendering, configuration, and logging.
"""

from worktrace.infrastructure.config import (
    RenderSettings,
    TrackingConfig,
    load_config,
)
from worktrace.infrastructure.logging_setup import setup_logging
from worktrace.infrastructure.persistence import (
    FilesystemResultStore,
    InMemoryResultStore,
)
from worktrace.infrastructure.serialization import dump_tree, parse_rendered_tree

__all__ = [
    # Persistence
    "InMemoryResultStore",
    "FilesystemResultStore",
    # Serialization
    "dump_tree",
    "parse_rendered_tree",
    # Config
    "RenderSettings",
    "TrackingConfig",
    "load_config",
    # Logging
    "setup_logging",
]
