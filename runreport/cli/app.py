"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .init import init_command
from .report import report_command
from .run import run_command
from .send import send_command

app = typer.Typer(
    name="runreport",
    help="Run a targets pipeline, store its outputs and report to Teams",
    no_args_is_help=True,
)

# Register commands
app.command("init")(init_command)
app.command("run")(run_command)
app.command("report")(report_command)
app.command("send")(send_command)


if __name__ == "__main__":
    app()
