"""Run orchestration."""

from .orchestrator import INVALIDATE_GRACE_SECONDS, PipelineStage, RunOrchestrator, RunOutcome
from .uploads import REPORT_BLOB_NAME, blob_prefix, store_run_data

__all__ = [
    "INVALIDATE_GRACE_SECONDS",
    "PipelineStage",
    "REPORT_BLOB_NAME",
    "RunOrchestrator",
    "RunOutcome",
    "blob_prefix",
    "store_run_data",
]
