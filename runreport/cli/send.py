"""Send command implementation."""

from pathlib import Path
from typing import List, Optional

import typer

from .common import load_settings, make_notifier, parse_recipients


def send_command(
    message: str = typer.Argument(..., help="Message to send"),
    ping: Optional[List[str]] = typer.Option(
        None,
        "--ping",
        "-p",
        help="Ping 'Name <email>' in the message (repeatable)",
    ),
    summary: str = typer.Option("", "--summary", "-s", help="Preview text"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file"),
) -> None:
    """Send a simple message to the Teams channel."""
    config = load_settings(config_path)
    result = make_notifier(config).send_message(message, parse_recipients(ping), summary)
    if not result.success:
        raise typer.Exit(1)
