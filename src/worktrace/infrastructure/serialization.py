"""
JSON serialization of rendered result trees.

render_tree() output is plain mappings. These pydantic models validate such
output when it comes back from disk or another process, and turn it into
immutable ResultSnapshot trees.
"""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from worktrace.domain.exceptions import InvalidArgument
from worktrace.domain.models import (
    RenderOptions,
    ResultSnapshot,
    ResultStatus,
    ResultType,
)
from worktrace.domain.result import ResultNode

FULL_RENDER = RenderOptions(include_detail=True, include_timings=True)


class RenderedError(BaseModel):
    """Error payload as written by ErrorInfo.to_dict()."""

    message: str
    error_type: str = ""
    cause: str | None = None


class RenderedNode(BaseModel):
    """One node of a rendered result tree."""

    name: str = Field(min_length=1)
    type: ResultType
    status: ResultStatus
    aggregate_status: ResultStatus | None = None
    error: RenderedError | None = None
    detail: Any = None
    start_time: str | None = None
    end_time: str | None = None
    duration_ms: int | None = None
    children: list["RenderedNode"] = Field(default_factory=list)

    def to_snapshot(self) -> ResultSnapshot:
        return ResultSnapshot(
            name=self.name,
            result_type=self.type,
            status=self.status,
            aggregate_status=self.aggregate_status or self.status,
            children=tuple(child.to_snapshot() for child in self.children),
            detail=self.detail,
            error_message=self.error.message if self.error else None,
            error_type=self.error.error_type if self.error else None,
            start_time=self.start_time,
            end_time=self.end_time,
            duration_ms=self.duration_ms,
        )


RenderedNode.model_rebuild()


class ResultDocument(BaseModel):
    """On-disk envelope for a stored run."""

    run_id: str = Field(min_length=1)
    saved_at: str
    root: RenderedNode


def dump_tree(node: ResultNode, options: RenderOptions | None = None) -> str:
    """Render a tree to JSON. Non JSON-native detail values are written with str()."""
    return json.dumps(node.render_tree(options or FULL_RENDER), indent=2, default=str)


def parse_rendered_tree(data: str | bytes | Mapping[str, Any]) -> ResultSnapshot:
    """
    Parse render_tree() output (JSON text or mapping) into a snapshot.

    Raises:
        InvalidArgument: If the data is not a valid rendered tree
    """
    try:
        if isinstance(data, (str, bytes)):
            rendered = RenderedNode.model_validate_json(data)
        else:
            rendered = RenderedNode.model_validate(data)
    except ValidationError as e:
        raise InvalidArgument(f"Invalid rendered result tree: {e}") from e
    return rendered.to_snapshot()
