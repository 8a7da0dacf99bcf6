"""Shared pytest fixtures for worktrace tests."""

import pytest

from worktrace.domain.generator_status import GeneratorStatusTracker
from worktrace.domain.models import ResultType
from worktrace.domain.result import ResultNode
from worktrace.infrastructure.persistence.memory import InMemoryResultStore


@pytest.fixture
def root() -> ResultNode:
    """Create a fresh COMMAND root node."""
    return ResultNode.create(ResultType.COMMAND, "deploy")


@pytest.fixture
def deploy_tree() -> ResultNode:
    """
    Build a finished deploy run.

    deploy (SUCCESS)
      build (SUCCESS)
      upload (SUCCESS)
        upload-a (SUCCESS)
        upload-b (FAILURE: timeout)
      notify (WARNING)
    """
    root = ResultNode.create(ResultType.COMMAND, "deploy", detail={"env": "prod"})

    build = root.add_child(ResultType.TASK, "build")
    build.mark_success()

    upload = root.add_child(ResultType.TASK, "upload")
    upload.mark_waiting()
    upload_a = upload.add_child(ResultType.WORKER, "upload-a")
    upload_b = upload.add_child(ResultType.WORKER, "upload-b")
    upload_a.mark_success()
    upload_b.mark_failure("timeout")
    upload.mark_success()

    notify = root.add_child(ResultType.UTILITY, "notify")
    notify.mark_warning()

    root.mark_success()
    return root


@pytest.fixture
def memory_store() -> InMemoryResultStore:
    """Create an in-memory result store."""
    return InMemoryResultStore()


@pytest.fixture
def generator_status() -> GeneratorStatusTracker:
    """Create a generator status tracker that is already running."""
    tracker = GeneratorStatusTracker()
    tracker.start()
    return tracker
