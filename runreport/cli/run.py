"""Run command implementation."""

from pathlib import Path
from typing import List, Optional

import pendulum
import typer
from rich.console import Console

from ..errors import RunReportError
from ..models import RunStatus
from ..pipeline import RunOrchestrator
from ..storage import get_blob_store
from .common import load_settings, make_notifier, make_runner, parse_recipients

console = Console()


def run_command(
    run_name: Optional[str] = typer.Argument(
        None,
        help="Run name used in blob paths. Default: today's date",
    ),
    upload: Optional[List[str]] = typer.Option(
        None,
        "--upload",
        "-u",
        help="Target to upload after a clean run (repeatable)",
    ),
    folder: Optional[List[str]] = typer.Option(
        None,
        "--folder",
        "-f",
        help="Folder to upload after a clean run (repeatable)",
    ),
    ping: Optional[List[str]] = typer.Option(
        None,
        "--ping",
        "-p",
        help="Ping 'Name <email>' in the report (repeatable)",
    ),
    invalidate: bool = typer.Option(False, "--invalidate", help="Re-run every target"),
    forced: Optional[bool] = typer.Option(None, "--forced/--no-forced", help="Overwrite existing blobs"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file"),
) -> None:
    """Run the pipeline, upload its outputs and send the run report."""
    config = load_settings(config_path)
    settings = config.config

    if run_name is None:
        run_name = pendulum.now().format("YYYY-MM-DD")

    container_url = config.get_container_url()
    if not container_url:
        console.print("[yellow]Warning: No container URL configured. Uploads will fail.[/yellow]")

    recipients = settings.ping + parse_recipients(ping)
    folders = [config.project_dir / name for name in (folder or settings.run_defaults.upload_folders)]

    orchestrator = RunOrchestrator(
        runner=make_runner(config),
        store=get_blob_store(container_url or ""),
        notifier=make_notifier(config),
    )

    try:
        outcome = orchestrator.run(
            run_name=run_name,
            project_name=settings.project_name,
            container_url=container_url or "",
            upload_targets=upload or settings.run_defaults.upload_targets,
            upload_folders=folders,
            ping=recipients,
            invalidate=invalidate,
            forced=settings.run_defaults.forced if forced is None else forced,
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Run interrupted by user[/yellow]")
        raise typer.Exit(1)
    except RunReportError as e:
        console.print(f"[red]Run failed: {e}[/red]")
        raise typer.Exit(1)

    if outcome.status == RunStatus.FAILED:
        raise typer.Exit(1)
