"""Task runner backed by the R targets package."""

import json
import subprocess
import tempfile
from pathlib import Path
from typing import Any, List, Optional

from rich.console import Console

from ..errors import TaskRunnerError
from ..models import TaskMeta, TaskRecord, TaskSituation
from .base import TaskRunner

console = Console()

# jsonlite prints data frames row-wise, missing values as null
_TO_JSON = "cat(jsonlite::toJSON({expr}, dataframe = 'rows', na = 'null', auto_unbox = TRUE, null = 'null'))"

META_FIELDS = ("type", "seconds", "bytes", "format", "warnings", "error")
SITREP_FLAGS = (
    "record",
    "always",
    "never",
    "command",
    "depend",
    "format",
    "repository",
    "iteration",
    "file",
    "seed",
)


class TargetsRunner(TaskRunner):
    """Drive a targets pipeline through Rscript."""

    artifact_extension = "rds"

    def __init__(
        self,
        project_dir: Path,
        rscript: str = "Rscript",
        timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize targets runner.

        Args:
            project_dir: Directory holding _targets.R
            rscript: Rscript executable
            timeout: Timeout for each Rscript call in seconds
        """
        self.project_dir = Path(project_dir)
        self.rscript = rscript
        self.timeout = timeout

    def _run(self, expr: str, stream: bool = False) -> subprocess.CompletedProcess:
        # streamed stdout goes straight to the terminal; stderr is kept for the error message
        try:
            result = subprocess.run(
                [self.rscript, "-e", expr],
                stdout=None if stream else subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                cwd=str(self.project_dir),
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise TaskRunnerError(expr, f"Timed out after {self.timeout}s") from e
        except OSError as e:
            raise TaskRunnerError(expr, f"Could not start {self.rscript}: {e}") from e

        if stream and result.stderr:
            console.print(result.stderr.rstrip(), markup=False, highlight=False)
        if result.returncode != 0:
            raise TaskRunnerError(expr, _error_message(result.stderr) or f"{self.rscript} exited with {result.returncode}")
        return result

    def _query(self, expr: str) -> Any:
        result = self._run(_TO_JSON.format(expr=expr))
        try:
            return json.loads(result.stdout or "[]")
        except json.JSONDecodeError as e:
            raise TaskRunnerError(expr, f"Unreadable output: {e}") from e

    def invalidate_all(self) -> None:
        self._run("targets::tar_invalidate(tidyselect::everything())")

    def situation_report(self) -> List[TaskSituation]:
        rows = self._query("targets::tar_sitrep()")
        return [
            TaskSituation(
                name=row["name"],
                flags={flag: row.get(flag) for flag in SITREP_FLAGS if flag in row},
            )
            for row in rows
        ]

    def execute(self) -> None:
        console.print(f"[dim]Building targets in {self.project_dir}[/dim]")
        self._run("targets::tar_make()", stream=True)

    def progress(self) -> List[TaskRecord]:
        return [TaskRecord(**row) for row in self._query("targets::tar_progress()")]

    def meta(self) -> List[TaskMeta]:
        fields = ", ".join(f'"{field}"' for field in META_FIELDS)
        rows = self._query(f"targets::tar_meta(fields = tidyselect::any_of(c({fields})))")
        return [TaskMeta(**_flatten(row)) for row in rows]

    def read_artifact(self, name: str) -> bytes:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / f"{name}.rds"
            self._run(
                f"saveRDS(targets::tar_read_raw({json.dumps(name)}), file = {json.dumps(str(path))})"
            )
            return path.read_bytes()


def _flatten(row: dict) -> dict:
    """Collapse list cells (e.g. multiple warnings) to a single string."""
    flat = {}
    for key, value in row.items():
        if isinstance(value, list):
            value = "; ".join(str(v) for v in value) if value else None
        flat[key] = value
    return flat


def _error_message(stderr: str) -> str:
    """Get the most relevant error line from R's stderr."""
    lines = [line.strip() for line in stderr.splitlines() if line.strip()]
    for line in reversed(lines):
        if line.startswith("Error"):
            return line.split(":", 1)[-1].strip() or line
    return lines[-1] if lines else ""
