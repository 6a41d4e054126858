"""Init command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import DEFAULT_CONFIG_NAME, ConfigModel, save_config

console = Console()


def init_command(
    project_name: str = typer.Option(..., "--project", "-p", help="Project name"),
    config_path: Path = typer.Option(
        Path(DEFAULT_CONFIG_NAME),
        "--config",
        "-c",
        help="Configuration file to create",
    ),
    container_url: Optional[str] = typer.Option(
        None,
        "--container-url",
        help="Blob container URL or local directory",
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing configuration"),
) -> None:
    """Create a run configuration file."""
    console.print(Panel.fit("runreport - Initialization", style="bold blue"))

    if config_path.exists() and not force:
        console.print(f"[yellow]{config_path} already exists. Use --force to overwrite it.[/yellow]")
        raise typer.Exit(1)

    try:
        config = ConfigModel(
            project_name=project_name,
            storage={"container_url": container_url, "container_url_env": "RUNREPORT_CONTAINER_URL"},
        )
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    save_config(config, config_path)
    console.print(f"[green]✓[/green] Configuration saved to {config_path}")
    console.print("Set TEAMS_WEBHOOK to the Workflows webhook URL to receive run reports.")
