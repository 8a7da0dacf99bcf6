"""
Application layer for result tracking.

Orchestration helpers that drive result nodes from running work.
"""

from worktrace.application.fan_out import ChildOperation, fan_out
from worktrace.application.run_report import build_run_report
from worktrace.application.tracking import abort_pending, atrack, track

__all__ = [
    "ChildOperation",
    "abort_pending",
    "atrack",
    "build_run_report",
    "fan_out",
    "track",
]
