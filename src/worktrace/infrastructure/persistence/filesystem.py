"""
Filesystem implementation of the result store.

Each run is one JSON document under <base>/results/<run_id>.json holding
the fully rendered tree (detail and timings included).
"""

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from worktrace.domain.exceptions import InvalidArgument
from worktrace.domain.interfaces import ResultStoreInterface
from worktrace.domain.models import ResultSnapshot
from worktrace.domain.result import ResultNode
from worktrace.infrastructure.serialization import FULL_RENDER, ResultDocument

logger = logging.getLogger(__name__)

_RUN_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class FilesystemResultStore(ResultStoreInterface):
    """Persistent store writing one JSON document per run."""

    def __init__(self, base_path: Path | str):
        self.base_path = Path(base_path)
        self.results_dir = self.base_path / "results"
        self.results_dir.mkdir(parents=True, exist_ok=True)

    def _get_run_file(self, run_id: str) -> Path:
        if not _RUN_ID_PATTERN.match(run_id):
            raise InvalidArgument(f"Invalid run id: {run_id!r}")
        return self.results_dir / f"{run_id}.json"

    def save(self, run_id: str, node: ResultNode) -> str:
        path = self._get_run_file(run_id)
        document = {
            "run_id": run_id,
            "saved_at": datetime.now(timezone.utc).isoformat(),
            "root": node.render_tree(FULL_RENDER),
        }
        # Write-to-temp + rename so readers never see a partial document
        temp_path = path.with_suffix(".tmp")
        try:
            with open(temp_path, "w") as f:
                json.dump(document, f, indent=2, default=str)
            temp_path.replace(path)
        except (OSError, TypeError, ValueError):
            temp_path.unlink(missing_ok=True)
            raise
        logger.debug("Saved run '%s' to %s", run_id, path)
        return run_id

    def load(self, run_id: str) -> ResultSnapshot:
        path = self._get_run_file(run_id)
        if not path.exists():
            raise KeyError(f"Run not found: {run_id}")
        try:
            # Bytes, so undecodable files surface as a ValidationError too
            document = ResultDocument.model_validate_json(path.read_bytes())
        except ValidationError as e:
            raise InvalidArgument(f"Corrupt result document {path}: {e}") from e
        return document.root.to_snapshot()

    def list_runs(self) -> list[str]:
        return sorted(p.stem for p in self.results_dir.glob("*.json"))
