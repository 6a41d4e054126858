"""Run orchestrator: execute the task graph, store outputs and report."""

import time
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..cards import build_run_report_card
from ..errors import TaskExecutionError
from ..models import Recipient, RunReport, RunStatus
from ..notify import TeamsNotifier
from ..report import aggregate_report, compute_run_status
from ..runner import TaskRunner
from ..storage import BlobStore
from .uploads import store_run_data

console = Console()

INVALIDATE_GRACE_SECONDS = 5


class PipelineStage:
    """Represents a pipeline stage."""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.success = False
        self.error: Optional[str] = None
        self.stats: Dict = {}

    def start(self):
        """Mark stage as started."""
        self.start_time = time.time()

    def complete(self, stats: Optional[Dict] = None):
        """Mark stage as completed successfully."""
        self.end_time = time.time()
        self.success = True
        if stats:
            self.stats.update(stats)

    def fail(self, error: str):
        """Mark stage as failed."""
        self.end_time = time.time()
        self.success = False
        self.error = error

    @property
    def started(self) -> bool:
        return self.start_time is not None

    @property
    def duration(self) -> float:
        """Get stage duration in seconds."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


class RunOutcome(BaseModel):
    """Outcome of a run."""

    run_name: str = Field(..., description="Run name")
    status: Optional[RunStatus] = Field(None, description="Overall status, None when nothing ran")
    report: RunReport = Field(default_factory=RunReport, description="Run report")
    uploaded: List[str] = Field(default_factory=list, description="Stored blob locations")
    notified: bool = Field(False, description="Whether the webhook accepted the report")
    error: Optional[str] = Field(None, description="Error message if the run failed")
    noop: bool = Field(False, description="Whether the run was skipped for lack of work")


class RunOrchestrator:
    """Orchestrates one run of a task graph."""

    def __init__(
        self,
        runner: TaskRunner,
        store: BlobStore,
        notifier: TeamsNotifier,
        grace_seconds: float = INVALIDATE_GRACE_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize run orchestrator.

        Args:
            runner: Task runner
            store: Blob store for run outputs
            notifier: Notifier for the run report
            grace_seconds: Abort window before invalidating old data
            sleep: Sleep function (for testing)
        """
        self.runner = runner
        self.store = store
        self.notifier = notifier
        self.grace_seconds = grace_seconds
        self.sleep = sleep
        self.stages: Dict[str, PipelineStage] = {}
        self.total_start_time: Optional[float] = None

    def _reset_stages(self):
        self.stages = {
            stage.name: stage
            for stage in [
                PipelineStage("invalidate", "Invalidating old data"),
                PipelineStage("execute", "Running tasks"),
                PipelineStage("aggregate", "Aggregating run report"),
                PipelineStage("upload", "Uploading run data"),
                PipelineStage("notify", "Sending run report"),
            ]
        }

    def _print_summary(self, run_name: str):
        """Print run execution summary."""
        total_duration = time.time() - self.total_start_time if self.total_start_time else 0

        table = Table(title=f"Run '{run_name}'")
        table.add_column("Stage", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Duration", style="yellow")
        table.add_column("Details", style="dim")

        for stage in self.stages.values():
            if not stage.started:
                continue
            status = "[green]✓[/green]" if stage.success else "[red]✗[/red]"
            duration = f"{stage.duration:.1f}s" if stage.duration > 0 else "-"
            if stage.success:
                details = ", ".join(f"{key}: {value}" for key, value in stage.stats.items())
            else:
                details = escape(stage.error or "Failed")
            table.add_row(stage.description, status, duration, details)

        if table.row_count:
            console.print(table)
        console.print(f"[dim]Total duration: {total_duration:.1f} seconds[/dim]")

    def run(
        self,
        run_name: str,
        project_name: str,
        container_url: str,
        upload_targets: Iterable[str] = (),
        upload_folders: Iterable[Union[str, Path]] = (),
        ping: Iterable[Recipient] = (),
        invalidate: bool = False,
        forced: bool = False,
    ) -> RunOutcome:
        """
        Run the task graph, store its outputs and send the run report.

        Returns:
            Outcome of the run

        Raises:
            TaskExecutionError: If the task runner failed, after reporting it
            UploadError: If run data could not be stored, after reporting it
        """
        self.total_start_time = time.time()
        self._reset_stages()

        console.print(Panel.fit(f"Run '{run_name}' • Project: {project_name}", style="bold blue"))

        try:
            return self._execute_run(
                run_name,
                project_name,
                container_url,
                list(upload_targets),
                list(upload_folders),
                list(ping),
                invalidate,
                forced,
            )
        finally:
            self._print_summary(run_name)

    def _invalidate(self):
        console.print(
            f"[bold yellow]*** THIS WILL OVERWRITE THE OLD DATA, "
            f"YOU HAVE {self.grace_seconds:g} SECONDS TO ABORT ***[/bold yellow]"
        )
        self.sleep(self.grace_seconds)

        stage = self.stages["invalidate"]
        stage.start()
        console.print("[yellow]Invalidating old data...[/yellow]")
        self.runner.invalidate_all()
        stage.complete()

    def _execute_run(
        self,
        run_name: str,
        project_name: str,
        container_url: str,
        upload_targets: List[str],
        upload_folders: List[Union[str, Path]],
        ping: List[Recipient],
        invalidate: bool,
        forced: bool,
    ) -> RunOutcome:
        """Execute the run stages."""
        if invalidate:
            self._invalidate()
        else:
            pending = [task.name for task in self.runner.situation_report() if task.pending]
            if not pending:
                console.print("[bold yellow]Nothing to do. Do you need to invalidate the previous run?[/bold yellow]")
                return RunOutcome(run_name=run_name, noop=True)
            console.print(f"[dim]{len(pending)} task(s) to run[/dim]")

        # Execute
        stage = self.stages["execute"]
        stage.start()
        console.print("[green]Running tasks...[/green]")
        execution_error: Optional[Exception] = None
        try:
            self.runner.execute()
            stage.complete()
        except Exception as e:
            execution_error = e
            stage.fail(str(e))
            console.print(f"[bold red]Task execution failed: {escape(str(e))}[/bold red]")

        # Aggregate
        stage = self.stages["aggregate"]
        stage.start()
        try:
            report = aggregate_report(self.runner)
            stage.complete({"tasks": len(report)})
        except Exception as e:
            stage.fail(str(e))
            if execution_error is None:
                raise
            report = RunReport()

        error_message = None
        if execution_error is not None:
            status = RunStatus.FAILED
            error_message = str(execution_error)
        else:
            status = compute_run_status(report)

        # Upload
        uploaded: List[str] = []
        upload_error: Optional[Exception] = None
        if status == RunStatus.SUCCESS:
            stage = self.stages["upload"]
            stage.start()
            try:
                uploaded = store_run_data(
                    self.runner,
                    self.store,
                    report,
                    run_name,
                    project_name,
                    container_url,
                    upload_targets,
                    upload_folders,
                    forced,
                )
                stage.complete({"blobs": len(uploaded)})
            except Exception as e:
                upload_error = e
                stage.fail(str(e))
                status = RunStatus.FAILED
                error_message = f"Upload failed: {e}"
                console.print(f"[bold red]{escape(error_message)}[/bold red]")

        # Notify
        notified = self._notify(report, status, project_name, run_name, ping, error_message)

        if execution_error is not None:
            console.print("[bold red]Run failed![/bold red]")
            raise TaskExecutionError(str(execution_error)) from execution_error
        if upload_error is not None:
            raise upload_error

        if status == RunStatus.SUCCESS:
            console.print("[bold green]Run successful![/bold green]")
        else:
            console.print(f"[bold yellow]Run finished: {status.value}[/bold yellow]")

        return RunOutcome(
            run_name=run_name,
            status=status,
            report=report,
            uploaded=uploaded,
            notified=notified,
            error=error_message,
        )

    def _notify(
        self,
        report: RunReport,
        status: RunStatus,
        project_name: str,
        run_name: str,
        ping: List[Recipient],
        error_message: Optional[str],
    ) -> bool:
        """Send the run report; failures are logged, never raised."""
        stage = self.stages["notify"]
        stage.start()
        try:
            card = build_run_report_card(report, status, project_name, run_name, ping, error_message)
            result = self.notifier.send_card(card)
        except Exception as e:
            stage.fail(str(e))
            console.print(f"[red]Could not send run report: {escape(str(e))}[/red]")
            return False

        if result.success:
            stage.complete({"status": result.status_code})
        else:
            stage.fail(result.response_body or "Rejected")
        return result.success
