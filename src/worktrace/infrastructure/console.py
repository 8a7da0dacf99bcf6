"""Rich console rendering for result trees and status trackers."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from worktrace.domain.models import (
    RenderOptions,
    ResultSnapshot,
    ResultStatus,
    ResultSummary,
    RunReport,
    StatusMessage,
    StatusMessageType,
)
from worktrace.domain.result import ResultNode, format_duration
from worktrace.domain.task_status import TaskStatusTracker

# Shared console instances
console = Console()
error_console = Console(stderr=True)

STATUS_STYLES = {
    ResultStatus.INITIALIZED: "dim",
    ResultStatus.WAITING: "cyan",
    ResultStatus.SUCCESS: "green",
    ResultStatus.WARNING: "yellow",
    ResultStatus.FAILURE: "red",
    ResultStatus.ERROR: "bold red",
    ResultStatus.UNKNOWN: "magenta",
}

MESSAGE_STYLES = {
    StatusMessageType.INFO: "blue",
    StatusMessageType.SUCCESS: "green",
    StatusMessageType.WARNING: "yellow",
    StatusMessageType.ERROR: "red",
    StatusMessageType.FATAL: "bold red",
}


def _node_label(node: ResultSnapshot, options: RenderOptions) -> Text:
    label = Text(node.name, style="bold")
    label.append(f" [{node.result_type.value}] ", style="dim")
    label.append(node.status.value, style=STATUS_STYLES[node.status])
    if node.aggregate_status is not node.status:
        label.append(f" (aggregate {node.aggregate_status.value})", style="dim")
    if options.include_timings and node.duration_ms is not None:
        label.append(f" {format_duration(node.duration_ms)}", style="cyan")
    if node.error_message:
        label.append(f" - {node.error_message}", style="red")
    if options.include_detail and node.detail is not None:
        label.append(f" {node.detail!r}", style="dim")
    return label


def _add_branch(tree: Tree, node: ResultSnapshot, options: RenderOptions) -> None:
    for child in node.children:
        if options.failures_only and not child.aggregate_status.is_failing:
            continue
        branch = tree.add(_node_label(child, options))
        _add_branch(branch, child, options)


def build_rich_tree(
    source: ResultNode | ResultSnapshot, options: RenderOptions | None = None
) -> Tree:
    """Build a rich Tree from a live node or a stored snapshot."""
    opts = options or RenderOptions()
    snapshot = source.snapshot() if isinstance(source, ResultNode) else source
    tree = Tree(_node_label(snapshot, opts))
    _add_branch(tree, snapshot, opts)
    return tree


def print_result_tree(
    source: ResultNode | ResultSnapshot,
    options: RenderOptions | None = None,
    target: Console | None = None,
) -> None:
    (target or console).print(build_rich_tree(source, options))


def print_summary(summary: ResultSummary, target: Console | None = None) -> None:
    """Print a result summary as a key/value table."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    table.add_row("Name", summary.name)
    table.add_row("Type", summary.result_type.value)
    table.add_row(
        "Status", Text(summary.status.value, style=STATUS_STYLES[summary.status])
    )
    table.add_row("Duration", format_duration(summary.duration_ms))
    table.add_row("Children", str(summary.child_count))
    table.add_row("Failed children", str(summary.failed_child_count))

    (target or console).print(table)


def print_status_messages(
    messages: Sequence[StatusMessage], target: Console | None = None
) -> None:
    """Print generator status messages, one styled line each."""
    out = target or console
    for message in messages:
        line = Text()
        if message.title:
            line.append(f"{message.title}: ", style=MESSAGE_STYLES[message.message_type])
        line.append(message.message)
        out.print(line)


def print_task_messages(
    tracker: TaskStatusTracker, target: Console | None = None
) -> None:
    """Print a task's status log as a table."""
    table = Table(title=tracker.task_name, show_header=True, box=None)
    table.add_column("Time", style="cyan")
    table.add_column("Message")
    for entry in tracker.get_messages():
        table.add_row(entry.timestamp.strftime("%H:%M:%S"), entry.message)
    (target or console).print(table)


def print_run_report(report: RunReport, target: Console | None = None) -> None:
    """Print the end-of-run report: outcome panel, summary, errors, messages."""
    out = target or console
    if report.exit_code == 0:
        out.print(
            Panel(
                f"{report.summary.name} finished {report.aggregate_status.value}",
                title="Success",
                border_style="green",
            )
        )
    else:
        content = Text(
            f"{report.summary.name} finished {report.aggregate_status.value}",
            style="bold red",
        )
        if report.first_failure_path:
            content.append(
                f"\nFirst failure: {' > '.join(report.first_failure_path)}",
                style="dim",
            )
        out.print(Panel(content, title="Failed", border_style="red"))

    print_summary(report.summary, out)

    if report.errors:
        out.print("\n[bold]Errors:[/bold]")
        for path, message in report.errors:
            line = Text("  ")
            line.append(" > ".join(path), style="red")
            line.append(f": {message}")
            out.print(line)

    if report.messages:
        out.print("\n[bold]Status:[/bold]")
        print_status_messages(report.messages, out)
