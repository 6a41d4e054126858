"""Report command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..errors import RunReportError
from ..models import RunStatus
from ..report import aggregate_report, compute_run_status
from .common import load_settings, make_runner

console = Console()

STATUS_STYLES = {
    RunStatus.SUCCESS: "green",
    RunStatus.SKIPPED: "blue",
    RunStatus.FAILED: "red",
}


def report_command(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file"),
) -> None:
    """Show the report of the latest run."""
    config = load_settings(config_path)

    try:
        report = aggregate_report(make_runner(config))
    except RunReportError as e:
        console.print(f"[red]Could not build report: {e}[/red]")
        raise typer.Exit(1)

    if not report.rows:
        console.print("[yellow]No tasks found.[/yellow]")
        return

    table = Table(title="Run Report")
    table.add_column("Name", style="cyan")
    table.add_column("Progress", style="magenta")
    table.add_column("Minutes", style="yellow", justify="right")
    table.add_column("Error", style="red")

    for row in report.rows:
        table.add_row(row.name, row.progress.value, row.minutes, row.error or "")

    console.print(table)
    status = compute_run_status(report)
    console.print(f"Status: [{STATUS_STYLES[status]}]{status.value.upper()}[/{STATUS_STYLES[status]}]")
