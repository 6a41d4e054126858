"""Run report aggregation."""

from .aggregator import PLACEHOLDER, aggregate_report, compute_run_status, format_minutes, join_report

__all__ = [
    "PLACEHOLDER",
    "aggregate_report",
    "compute_run_status",
    "format_minutes",
    "join_report",
]
