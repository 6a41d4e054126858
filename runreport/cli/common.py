"""Shared helpers for CLI commands."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from ..config import Config, Recipient
from ..notify import TeamsNotifier
from ..runner import TargetsRunner

console = Console()


def load_settings(config_path: Optional[Path]) -> Config:
    """Load configuration, exiting with a message when it is unusable."""
    config = Config(config_path)
    try:
        config.config
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {config.config_path}. Run 'runreport init' first.[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    return config


def make_runner(config: Config) -> TargetsRunner:
    runner_config = config.config.runner
    return TargetsRunner(
        project_dir=config.project_dir,
        rscript=runner_config.rscript,
        timeout=runner_config.timeout,
    )


def make_notifier(config: Config) -> TeamsNotifier:
    webhook_url = config.get_webhook_url()
    if not webhook_url:
        console.print("[yellow]Warning: No webhook URL configured. Notifications will not be sent.[/yellow]")
    return TeamsNotifier(webhook_url, timeout=config.config.notify.timeout)


def parse_recipients(values: Optional[List[str]]) -> List[Recipient]:
    """Parse 'Name <email>' or bare 'email' values into recipients."""
    recipients = []
    for value in values or []:
        value = value.strip()
        if "<" in value and value.endswith(">"):
            name, identifier = value[:-1].split("<", 1)
            name = name.strip()
            identifier = identifier.strip()
        else:
            identifier = value
            name = value.split("@", 1)[0]
        if not identifier:
            raise typer.BadParameter(f"Invalid recipient: {value!r}")
        recipients.append(Recipient(name=name or identifier, identifier=identifier))
    return recipients
