"""Run report aggregation from task progress and metadata."""

from collections import Counter
from typing import Iterable, List, Optional, Sequence

from ..errors import JoinCardinalityError
from ..models import ReportRow, RunReport, RunStatus, TaskMeta, TaskProgress, TaskRecord
from ..runner import TaskRunner

PLACEHOLDER = "-"


def _check_unique(side: str, names: Iterable[str]) -> None:
    duplicates = [name for name, count in Counter(names).items() if count > 1]
    if duplicates:
        raise JoinCardinalityError(side, duplicates)


def format_minutes(progress: TaskProgress, seconds: Optional[float]) -> str:
    """Format elapsed time for completed tasks, placeholder otherwise."""
    if progress != TaskProgress.COMPLETED or seconds is None:
        return PLACEHOLDER
    return f"{round(seconds / 60, 1):.1f}"


def join_report(progress: Sequence[TaskRecord], meta: Sequence[TaskMeta]) -> RunReport:
    """
    Join task progress with task metadata, one-to-one on task name.

    Every progress row is kept in order; rows without metadata keep empty
    metadata fields.

    Raises:
        JoinCardinalityError: If a task name repeats in either input
    """
    _check_unique("progress", (record.name for record in progress))
    _check_unique("metadata", (record.name for record in meta))

    meta_by_name = {record.name: record for record in meta}
    rows: List[ReportRow] = []
    for record in progress:
        fields = {}
        task_meta = meta_by_name.get(record.name)
        if task_meta is not None:
            fields.update(task_meta.model_dump(exclude={"name"}, exclude_none=True))
        # progress wins where both sides report the same field
        fields.update(record.model_dump(exclude={"name", "progress"}, exclude_none=True))
        rows.append(
            ReportRow(
                name=record.name,
                progress=record.progress,
                minutes=format_minutes(record.progress, task_meta.seconds if task_meta else None),
                **fields,
            )
        )
    return RunReport(rows=rows)


def aggregate_report(runner: TaskRunner) -> RunReport:
    """Build the run report from the runner's current progress and metadata."""
    return join_report(runner.progress(), runner.meta())


def compute_run_status(report: RunReport) -> RunStatus:
    """
    Compute the overall run status.

    All tasks skipped is SKIPPED, any errored task is FAILED, anything else
    is SUCCESS. An empty report is FAILED since nothing ran.
    """
    progresses = report.progresses
    if not progresses:
        return RunStatus.FAILED
    if all(progress == TaskProgress.SKIPPED for progress in progresses):
        return RunStatus.SKIPPED
    if any(progress == TaskProgress.ERRORED for progress in progresses):
        return RunStatus.FAILED
    return RunStatus.SUCCESS
