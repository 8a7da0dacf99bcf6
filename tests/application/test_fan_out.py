"""Tests for concurrent fan-out of child operations."""

import asyncio

import pytest

from worktrace.application.fan_out import ChildOperation, fan_out
from worktrace.domain.exceptions import InvalidArgument, InvalidState
from worktrace.domain.models import ResultStatus, ResultType


def _upload(name: str, delay: float, fail: bool = False) -> ChildOperation:
    async def run(child):
        await asyncio.sleep(delay)
        if fail:
            raise OSError(f"{name} refused")
        return f"{name}-etag"

    return ChildOperation(ResultType.WORKER, name, run)


class TestFanOut:
    """Tests for fan_out()."""

    def test_children_created_in_operation_order(self, root):
        ops = [_upload("slow", 0.02), _upload("fast", 0.0)]
        outcomes = asyncio.run(fan_out(root, ops))
        assert [c.name for c in root.children] == ["slow", "fast"]
        assert outcomes == ["slow-etag", "fast-etag"]
        assert all(c.status is ResultStatus.SUCCESS for c in root.children)

    def test_children_waiting_while_running(self, root):
        observed = {}

        async def probe(child):
            observed["status"] = child.status
            observed["siblings"] = len(child.parent.children)

        ops = [
            ChildOperation(ResultType.WORKER, "probe", probe),
            _upload("other", 0.0),
        ]
        asyncio.run(fan_out(root, ops))
        assert observed == {"status": ResultStatus.WAITING, "siblings": 2}

    def test_failure_isolated_to_its_child(self, root):
        ops = [_upload("a", 0.0), _upload("b", 0.01, fail=True), _upload("c", 0.0)]
        outcomes = asyncio.run(fan_out(root, ops))

        a, b, c = root.children
        assert a.status is ResultStatus.SUCCESS
        assert b.status is ResultStatus.ERROR
        assert b.error.message == "b refused"
        assert c.status is ResultStatus.SUCCESS
        assert isinstance(outcomes[1], OSError)
        assert root.aggregate_status() is ResultStatus.ERROR

    def test_fail_fast_reraises_after_join(self, root):
        ops = [_upload("a", 0.02), _upload("b", 0.0, fail=True)]
        with pytest.raises(OSError, match="b refused"):
            asyncio.run(fan_out(root, ops, fail_fast=True))
        assert root.children[0].status is ResultStatus.SUCCESS

    def test_operation_may_set_its_own_status(self, root):
        async def partial(child):
            child.mark_warning()
            return 3

        asyncio.run(fan_out(root, [ChildOperation(ResultType.TASK, "partial", partial)]))
        assert root.children[0].status is ResultStatus.WARNING

    def test_operation_may_build_grandchildren(self, root):
        async def nested(child):
            child.add_child(ResultType.TASK, "step").mark_failure("bad checksum")

        asyncio.run(fan_out(root, [ChildOperation(ResultType.WORKER, "nested", nested)]))
        (child,) = root.children
        assert child.status is ResultStatus.SUCCESS
        assert child.aggregate_status() is ResultStatus.FAILURE

    def test_empty_operations(self, root):
        assert asyncio.run(fan_out(root, [])) == []
        assert root.children == ()

    def test_invalid_operation_attaches_nothing(self, root):
        """A malformed later operation must not leave earlier children behind."""
        ops = [_upload("a", 0.0), ChildOperation(ResultType.WORKER, "", _upload("b", 0.0).run)]
        with pytest.raises(InvalidArgument):
            asyncio.run(fan_out(root, ops))
        assert root.children == ()

    def test_terminal_parent_attaches_nothing(self, root):
        root.mark_success()
        with pytest.raises(InvalidState):
            asyncio.run(fan_out(root, [_upload("a", 0.0)]))
        assert root.children == ()
