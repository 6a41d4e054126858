"""Run report models."""

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .task import TaskProgress

MISSING = "NA"


class RunStatus(str, Enum):
    """Overall outcome of a run."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class ReportRow(BaseModel):
    """Task progress joined with task metadata."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Task name")
    progress: TaskProgress = Field(..., description="Task progress")
    minutes: str = Field("-", description="Formatted elapsed minutes")
    type: Optional[str] = Field(None, description="Task type")
    seconds: Optional[float] = Field(None, description="Elapsed build time in seconds")
    bytes: Optional[int] = Field(None, description="Stored output size")
    format: Optional[str] = Field(None, description="Storage format")
    warnings: Optional[str] = Field(None, description="Warnings raised while building")
    error: Optional[str] = Field(None, description="Error message if the task failed")

    def cell(self, column: str) -> str:
        """Get a column value as display text."""
        value = getattr(self, column, None)
        if value is None:
            return MISSING
        if isinstance(value, Enum):
            return value.value
        return str(value)


class RunReport(BaseModel):
    """Ordered per-task report of a run."""

    rows: List[ReportRow] = Field(default_factory=list, description="One row per task")

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def names(self) -> List[str]:
        return [row.name for row in self.rows]

    @property
    def progresses(self) -> List[TaskProgress]:
        return [row.progress for row in self.rows]

    def as_table(self, columns: Sequence[str]) -> List[Dict[str, str]]:
        """Get rows restricted to the given columns as display text."""
        return [{column: row.cell(column) for column in columns} for row in self.rows]

    def to_records(self) -> List[Dict[str, Any]]:
        """Get rows as plain JSON-compatible dicts."""
        return [row.model_dump(mode="json") for row in self.rows]
