"""Tests for the worktrace command-line viewer."""

import json
import logging

import pytest
from click.testing import CliRunner

from worktrace.cli import main
from worktrace.domain.models import ResultType
from worktrace.domain.result import ResultNode
from worktrace.infrastructure.persistence.filesystem import FilesystemResultStore


@pytest.fixture(autouse=True)
def reset_worktrace_logger():
    """The CLI installs handlers on the 'worktrace' logger; drop them afterwards."""
    yield
    logger = logging.getLogger("worktrace")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def store_dir(tmp_path, deploy_tree):
    """Store holding one failed run and one successful run."""
    store = FilesystemResultStore(tmp_path)
    store.save("deploy-1", deploy_tree)
    healthy = ResultNode.create(ResultType.COMMAND, "lint")
    healthy.add_child(ResultType.TASK, "ruff").mark_success()
    healthy.mark_success()
    store.save("lint-1", healthy)
    return tmp_path


class TestListCommand:
    def test_lists_runs(self, runner, store_dir):
        result = runner.invoke(main, ["list", "--results-dir", str(store_dir)])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["deploy-1", "lint-1"]

    def test_empty_store(self, runner, tmp_path):
        result = runner.invoke(main, ["list", "--results-dir", str(tmp_path)])
        assert result.exit_code == 0
        assert "No stored runs." in result.output


class TestShowCommand:
    """Tests for `worktrace show`."""

    def test_failed_run_exits_1(self, runner, store_dir):
        result = runner.invoke(main, ["show", "deploy-1", "--results-dir", str(store_dir)])
        assert result.exit_code == 1
        assert "upload-b [WORKER] FAILURE - timeout" in result.output

    def test_successful_run_exits_0(self, runner, store_dir):
        result = runner.invoke(main, ["show", "lint-1", "--results-dir", str(store_dir)])
        assert result.exit_code == 0
        assert "ruff [TASK] SUCCESS" in result.output

    def test_failures_only(self, runner, store_dir):
        result = runner.invoke(
            main, ["show", "deploy-1", "--results-dir", str(store_dir), "--failures-only"]
        )
        assert "upload-b" in result.output
        assert "notify" not in result.output

    def test_detail(self, runner, store_dir):
        result = runner.invoke(
            main, ["show", "deploy-1", "--results-dir", str(store_dir), "--detail"]
        )
        assert "{'env': 'prod'}" in result.output

    def test_missing_run_exits_2(self, runner, store_dir):
        result = runner.invoke(main, ["show", "absent", "--results-dir", str(store_dir)])
        assert result.exit_code == 2
        assert "Run not found: absent" in result.output


class TestConfigOption:
    def test_results_dir_from_config(self, runner, store_dir, tmp_path):
        config_path = tmp_path / "worktrace.json"
        config_path.write_text(
            json.dumps({"results_dir": str(store_dir), "render": {"failures_only": True}})
        )
        result = runner.invoke(main, ["--config", str(config_path), "show", "deploy-1"])
        assert result.exit_code == 1
        assert "notify" not in result.output

    def test_invalid_config(self, runner, tmp_path):
        config_path = tmp_path / "worktrace.json"
        config_path.write_text("[]")
        result = runner.invoke(main, ["--config", str(config_path), "list"])
        assert result.exit_code == 1
        assert "Expected dict" in result.output
