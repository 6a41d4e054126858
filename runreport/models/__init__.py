"""Data models for pipeline runs."""

from .recipient import Recipient
from .report import MISSING, ReportRow, RunReport, RunStatus
from .task import TaskMeta, TaskProgress, TaskRecord, TaskSituation

__all__ = [
    "MISSING",
    "Recipient",
    "ReportRow",
    "RunReport",
    "RunStatus",
    "TaskMeta",
    "TaskProgress",
    "TaskRecord",
    "TaskSituation",
]
