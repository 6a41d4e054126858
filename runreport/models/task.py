"""Task models read from the task runner."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskProgress(str, Enum):
    """Progress of a single task as reported by the task runner."""

    COMPLETED = "completed"
    ERRORED = "errored"
    SKIPPED = "skipped"
    OUTDATED = "outdated"
    STARTED = "started"
    DISPATCHED = "dispatched"
    CANCELED = "canceled"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "TaskProgress":
        """Convert a raw runner value, mapping anything unrecognized to UNKNOWN."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.UNKNOWN


class TaskRecord(BaseModel):
    """Progress record for one task."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Task name")
    progress: TaskProgress = Field(TaskProgress.UNKNOWN, description="Task progress")
    type: Optional[str] = Field(None, description="Task type (stem, pattern, branch)")
    parent: Optional[str] = Field(None, description="Parent pattern for branches")
    branches: Optional[int] = Field(None, description="Number of branches")

    @field_validator("progress", mode="before")
    @classmethod
    def parse_progress(cls, v: Any) -> TaskProgress:
        """Unknown progress values become UNKNOWN instead of failing validation."""
        return TaskProgress.parse(v)


class TaskMeta(BaseModel):
    """Metadata record for one task."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Task name")
    seconds: Optional[float] = Field(None, description="Elapsed build time in seconds")
    bytes: Optional[int] = Field(None, description="Stored output size")
    format: Optional[str] = Field(None, description="Storage format")
    warnings: Optional[str] = Field(None, description="Warnings raised while building")
    error: Optional[str] = Field(None, description="Error message if the task failed")


class TaskSituation(BaseModel):
    """Situation report entry: why a task would or would not rerun."""

    name: str = Field(..., description="Task name")
    flags: Dict[str, Optional[bool]] = Field(default_factory=dict, description="Invalidation flags")

    @property
    def pending(self) -> bool:
        """Whether the task would run on the next execution."""
        if self.flags.get("never"):
            return False
        return any(value for key, value in self.flags.items() if key != "never")
