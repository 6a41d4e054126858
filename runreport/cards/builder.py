"""Card builders for run notifications."""

from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from ..models import MISSING, Recipient, RunReport, RunStatus, TaskProgress
from .elements import Card, CardNode, Column, ColumnSet, Container, MentionEntity, TextBlock

STATUS_COLORS = {
    RunStatus.SUCCESS.value: "good",
    RunStatus.SKIPPED.value: "accent",
}
ERROR_COLOR = "attention"

CELL_COLORS = {
    TaskProgress.COMPLETED.value: "good",
    TaskProgress.SKIPPED.value: "accent",
    TaskProgress.ERRORED.value: "attention",
}
DEFAULT_COLOR = "default"

REPORT_COLUMNS = ("name", "progress", "minutes")


def _status_text(status: Union[RunStatus, str, None]) -> str:
    if isinstance(status, RunStatus):
        return status.value
    if isinstance(status, str) and status != "":
        return status
    return "error"


def status_color(status: Union[RunStatus, str, None]) -> str:
    """Get the banner color of a status; anything unrecognized is an error."""
    return STATUS_COLORS.get(_status_text(status), ERROR_COLOR)


def cell_color(value: Any) -> str:
    """Get the cell color of a task progress value."""
    return CELL_COLORS.get(value, DEFAULT_COLOR) if isinstance(value, str) else DEFAULT_COLOR


def build_status_banner(
    task_name: str,
    status: Union[RunStatus, str, None],
    extra_items: Sequence[CardNode] = (),
) -> Container:
    """
    Build the colored banner wrapping a run's card content.

    Args:
        task_name: Name shown above the status
        status: Run status; empty or missing values are shown as ERROR
        extra_items: Elements appended below the status

    Returns:
        Container styled after the status
    """
    text = _status_text(status)
    color = status_color(text)
    return Container(
        style=color,
        bleed=True,
        items=[
            TextBlock(size="small", weight="bolder", text=task_name),
            TextBlock(size="large", weight="bolder", spacing="none", color=color, text=text.upper()),
            *extra_items,
        ],
    )


def build_columnset(rows: Sequence[Mapping[str, Any]], columns: Sequence[str]) -> ColumnSet:
    """Turn table columns into a column set, one column per requested name."""
    result = []
    for column in columns:
        cells: List[CardNode] = []
        for row in rows:
            value = row.get(column)
            text = "-" if value is None or value == MISSING else str(value)
            cells.append(TextBlock(text=text, spacing="none", color=cell_color(value)))
        header = TextBlock(text=column, weight="bolder")
        result.append(Column(items=[header, *cells]))
    return ColumnSet(columns=result)


def build_error_block(message: Optional[str]) -> TextBlock:
    """Wrap an error message for display."""
    return TextBlock(text=message or "Unknown error", color=ERROR_COLOR, wrap=True)


def build_mentions(recipients: Iterable[Recipient]) -> List[MentionEntity]:
    return [
        MentionEntity(text=f"<at>{recipient.name}</at>", mentioned=recipient)
        for recipient in recipients
    ]


def build_ping_block(entities: Sequence[MentionEntity]) -> Optional[TextBlock]:
    """List mention placeholders; None when nobody is pinged."""
    if not entities:
        return None
    return TextBlock(text="Ping " + ", ".join(entity.text for entity in entities))


def assemble_card(body: Sequence[CardNode], mentions: Sequence[MentionEntity], summary: str = "") -> Card:
    return Card(body=list(body), entities=list(mentions), width="Full", summary=summary)


def build_notification(
    body: Sequence[CardNode],
    recipients: Iterable[Recipient] = (),
    summary: str = "",
) -> Card:
    """Assemble a card, pinging the recipients below the body."""
    mentions = build_mentions(recipients)
    body = list(body)
    ping_block = build_ping_block(mentions)
    if ping_block is not None:
        body.append(ping_block)
    return assemble_card(body, mentions, summary)


def build_run_report_card(
    report: RunReport,
    status: Union[RunStatus, str, None],
    project_name: str,
    run_name: str,
    recipients: Iterable[Recipient] = (),
    error_message: Optional[str] = None,
) -> Card:
    """
    Build the card describing the outcome of a run.

    Args:
        report: Run report shown as a name/progress/minutes table
        status: Overall run status
        project_name: Project name
        run_name: Run name
        recipients: People to ping
        error_message: Error shown below the table when set

    Returns:
        Card ready to send
    """
    title = f"{project_name}/{run_name}"
    items: List[CardNode] = [build_columnset(report.as_table(REPORT_COLUMNS), REPORT_COLUMNS)]
    if error_message is not None:
        items.append(build_error_block(error_message))
    banner = build_status_banner(title, status, items)
    summary = f"{title}: {_status_text(status).upper()}"
    return build_notification([banner], recipients, summary)
