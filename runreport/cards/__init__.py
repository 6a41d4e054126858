"""Adaptive Card construction."""

from .builder import (
    REPORT_COLUMNS,
    assemble_card,
    build_columnset,
    build_error_block,
    build_mentions,
    build_notification,
    build_ping_block,
    build_run_report_card,
    build_status_banner,
    cell_color,
    status_color,
)
from .elements import Card, CardNode, Column, ColumnSet, Container, MentionEntity, TextBlock

__all__ = [
    "Card",
    "CardNode",
    "Column",
    "ColumnSet",
    "Container",
    "MentionEntity",
    "TextBlock",
    "REPORT_COLUMNS",
    "assemble_card",
    "build_columnset",
    "build_error_block",
    "build_mentions",
    "build_notification",
    "build_ping_block",
    "build_run_report_card",
    "build_status_banner",
    "cell_color",
    "status_color",
]
