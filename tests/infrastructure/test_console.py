"""Tests for rich console rendering."""

import io

import pytest
from rich.console import Console

from worktrace.application.run_report import build_run_report
from worktrace.domain.models import RenderOptions, StatusMessage, StatusMessageType
from worktrace.domain.task_status import TaskStatusTracker
from worktrace.infrastructure.console import (
    build_rich_tree,
    print_result_tree,
    print_run_report,
    print_status_messages,
    print_summary,
    print_task_messages,
)


@pytest.fixture
def recording_console() -> Console:
    """Console that records output instead of writing to a terminal."""
    return Console(file=io.StringIO(), record=True, width=120, color_system=None)


class TestResultTree:
    """Tests for tree rendering."""

    def test_tree_from_live_node(self, deploy_tree, recording_console):
        print_result_tree(deploy_tree, target=recording_console)
        text = recording_console.export_text()
        assert "deploy [COMMAND] SUCCESS (aggregate FAILURE)" in text
        assert "upload-b [WORKER] FAILURE - timeout" in text
        assert "notify" in text

    def test_tree_from_snapshot_failures_only(self, deploy_tree, recording_console):
        print_result_tree(
            deploy_tree.snapshot(),
            RenderOptions(failures_only=True),
            recording_console,
        )
        text = recording_console.export_text()
        assert "upload-b" in text
        assert "notify" not in text
        assert "build" not in text

    def test_detail_with_brackets_is_not_markup(self, root, recording_console):
        root.set_detail("[bold]raw[/bold]")
        print_result_tree(root, RenderOptions(include_detail=True), recording_console)
        assert "[bold]raw[/bold]" in recording_console.export_text()

    def test_build_rich_tree_children(self, deploy_tree):
        tree = build_rich_tree(deploy_tree)
        assert len(tree.children) == 3


class TestSummaryAndMessages:
    def test_print_summary(self, deploy_tree, recording_console):
        print_summary(deploy_tree.to_summary(), recording_console)
        text = recording_console.export_text()
        assert "deploy" in text
        assert "COMMAND" in text
        assert "Failed children" in text

    def test_print_status_messages(self, recording_console):
        print_status_messages(
            [
                StatusMessage("Run make install", title="Next"),
                StatusMessage("Missing template", message_type=StatusMessageType.ERROR),
            ],
            recording_console,
        )
        text = recording_console.export_text()
        assert "Next: Run make install" in text
        assert "Missing template" in text

    def test_print_task_messages(self, recording_console):
        tracker = TaskStatusTracker("sync")
        tracker.record("Fetching index")
        print_task_messages(tracker, recording_console)
        text = recording_console.export_text()
        assert "sync" in text
        assert "Fetching index" in text


class TestRunReport:
    """Tests for print_run_report()."""

    def test_failed_report(self, deploy_tree, recording_console):
        print_run_report(build_run_report(deploy_tree), recording_console)
        text = recording_console.export_text()
        assert "Failed" in text
        assert "First failure: deploy > upload > upload-b" in text
        assert "deploy > upload > upload-b: timeout" in text

    def test_successful_report(self, root, recording_console):
        root.mark_success()
        print_run_report(build_run_report(root), recording_console)
        text = recording_console.export_text()
        assert "Success" in text
        assert "deploy finished SUCCESS" in text
