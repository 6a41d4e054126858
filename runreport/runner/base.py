"""Task runner interface and implementations."""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Sequence

from ..models import TaskMeta, TaskRecord, TaskSituation


class TaskRunner(ABC):
    """Abstract base class for dependency-graph task runners."""

    artifact_extension = "json"

    @abstractmethod
    def invalidate_all(self) -> None:
        """Discard every cached task output so the next execution rebuilds all."""
        pass

    @abstractmethod
    def situation_report(self) -> List[TaskSituation]:
        """
        Report which tasks would run on the next execution.

        Returns:
            One entry per task with its invalidation flags
        """
        pass

    @abstractmethod
    def execute(self) -> None:
        """
        Build every outdated task.

        Raises:
            Exception: Whatever the runner raises when a build fails
        """
        pass

    @abstractmethod
    def progress(self) -> List[TaskRecord]:
        """Get the progress of every task from the latest execution."""
        pass

    @abstractmethod
    def meta(self) -> List[TaskMeta]:
        """Get stored metadata of every task."""
        pass

    @abstractmethod
    def read_artifact(self, name: str) -> bytes:
        """
        Read the stored output of a task.

        Args:
            name: Task name

        Returns:
            Serialized task output, in `artifact_extension` format
        """
        pass


class MockTaskRunner(TaskRunner):
    """In-memory task runner for testing and dry runs."""

    def __init__(
        self,
        progress: Optional[Sequence[TaskRecord]] = None,
        meta: Optional[Sequence[TaskMeta]] = None,
        situation: Optional[Sequence[TaskSituation]] = None,
        artifacts: Optional[Dict[str, bytes]] = None,
        error: Optional[Exception] = None,
        on_execute: Optional[Callable[["MockTaskRunner"], None]] = None,
    ) -> None:
        """
        Initialize mock runner.

        Args:
            progress: Records returned by progress()
            meta: Records returned by meta()
            situation: Entries returned by situation_report(); every task
                is reported pending when omitted
            artifacts: Raw artifact data by task name
            error: Raised by execute() when set
            on_execute: Hook called by execute() before raising `error`
        """
        self._progress = list(progress or [])
        self._meta = list(meta or [])
        self._situation = list(situation) if situation is not None else None
        self.artifacts = dict(artifacts or {})
        self.error = error
        self.on_execute = on_execute
        self.calls: List[str] = []

    def invalidate_all(self) -> None:
        self.calls.append("invalidate_all")

    def situation_report(self) -> List[TaskSituation]:
        self.calls.append("situation_report")
        if self._situation is not None:
            return list(self._situation)
        return [TaskSituation(name=record.name, flags={"record": True}) for record in self._progress]

    def execute(self) -> None:
        self.calls.append("execute")
        if self.on_execute:
            self.on_execute(self)
        if self.error is not None:
            raise self.error

    def progress(self) -> List[TaskRecord]:
        self.calls.append("progress")
        return list(self._progress)

    def meta(self) -> List[TaskMeta]:
        self.calls.append("meta")
        return list(self._meta)

    def read_artifact(self, name: str) -> bytes:
        self.calls.append(f"read_artifact:{name}")
        if name not in self.artifacts:
            raise KeyError(f"No artifact named '{name}'")
        return self.artifacts[name]
