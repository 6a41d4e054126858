"""Tests for Adaptive Card construction."""

import json

import pytest

from runreport.cards import (
    Card,
    ColumnSet,
    Container,
    TextBlock,
    assemble_card,
    build_columnset,
    build_error_block,
    build_mentions,
    build_notification,
    build_ping_block,
    build_run_report_card,
    build_status_banner,
)
from runreport.models import Recipient, RunStatus
from runreport.report import join_report

JANE = Recipient(name="Jane", identifier="jane.doe@example.com")
OMAR = Recipient(name="Omar", identifier="omar@example.com")


class TestStatusBanner:

    @pytest.mark.parametrize(
        "status, color",
        [
            ("success", "good"),
            (RunStatus.SUCCESS, "good"),
            ("skipped", "accent"),
            (RunStatus.SKIPPED, "accent"),
            ("failed", "attention"),
            ("weird", "attention"),
            ("", "attention"),
            (None, "attention"),
        ],
    )
    def test_color(self, status, color):
        banner = build_status_banner("proj/run", status)
        assert banner.style == color
        assert banner.items[1].color == color

    def test_layout(self):
        banner = build_status_banner("proj/run", "success")

        assert isinstance(banner, Container)
        assert banner.bleed is True
        name, status = banner.items
        assert (name.text, name.size, name.weight) == ("proj/run", "small", "bolder")
        assert (status.text, status.size, status.weight, status.spacing) == ("SUCCESS", "large", "bolder", "none")

    @pytest.mark.parametrize("status", ["", None])
    def test_missing_status_shown_as_error(self, status):
        assert build_status_banner("x", status).items[1].text == "ERROR"

    def test_extra_items_follow_status(self):
        extra = [TextBlock(text="one"), TextBlock(text="two")]
        banner = build_status_banner("x", "skipped", extra)
        assert [item.text for item in banner.items] == ["x", "SKIPPED", "one", "two"]

    def test_pure(self):
        extra = [TextBlock(text="one")]
        first = build_status_banner("x", "failed", extra)
        second = build_status_banner("x", "failed", extra)
        assert first == second
        assert first.model_dump() == second.model_dump()


class TestColumnSet:

    def test_na_rendered_as_dash(self):
        columnset = build_columnset([{"x": "completed"}, {"x": "NA"}], ["x"])

        (column,) = columnset.columns
        header, *cells = column.items
        assert header.text == "x"
        assert header.weight == "bolder"
        assert [cell.text for cell in cells] == ["completed", "-"]
        assert [cell.color for cell in cells] == ["good", "default"]

    def test_progress_colors(self):
        rows = [{"p": "completed"}, {"p": "skipped"}, {"p": "errored"}, {"p": "outdated"}]
        cells = build_columnset(rows, ["p"]).columns[0].items[1:]
        assert [cell.color for cell in cells] == ["good", "accent", "attention", "default"]
        assert all(cell.spacing == "none" for cell in cells)

    def test_columns_in_requested_order(self):
        rows = [{"name": "a", "minutes": "0.5"}, {"name": "b", "minutes": "-"}]
        columnset = build_columnset(rows, ["minutes", "name"])

        assert [column.items[0].text for column in columnset.columns] == ["minutes", "name"]
        assert [cell.text for cell in columnset.columns[1].items[1:]] == ["a", "b"]

    def test_missing_values(self):
        cells = build_columnset([{"x": None}, {}], ["x"]).columns[0].items[1:]
        assert [cell.text for cell in cells] == ["-", "-"]


class TestBlocks:

    def test_error_block(self):
        block = build_error_block("disk full")
        assert block.text == "disk full"
        assert block.color == "attention"
        assert block.wrap is True

    @pytest.mark.parametrize("message", ["", None])
    def test_error_block_without_message(self, message):
        assert build_error_block(message).text == "Unknown error"

    def test_mentions(self):
        mentions = build_mentions([JANE, OMAR])
        assert [mention.text for mention in mentions] == ["<at>Jane</at>", "<at>Omar</at>"]
        assert mentions[0].model_dump() == {
            "type": "mention",
            "text": "<at>Jane</at>",
            "mentioned": {"id": "jane.doe@example.com", "name": "Jane"},
        }

    def test_ping_block(self):
        block = build_ping_block(build_mentions([JANE, OMAR]))
        assert block.text == "Ping <at>Jane</at>, <at>Omar</at>"

    def test_no_ping_block_without_recipients(self):
        assert build_ping_block([]) is None


class TestCard:

    def test_message_shape(self):
        card = assemble_card([TextBlock(text="Hello World!")], build_mentions([JANE]), "preview")
        message = card.to_message()

        assert message["type"] == "message"
        assert message["summary"] == "preview"
        (attachment,) = message["attachments"]
        assert attachment["contentType"] == "application/vnd.microsoft.card.adaptive"
        content = attachment["content"]
        assert content["type"] == "AdaptiveCard"
        assert content["body"] == [{"type": "TextBlock", "text": "Hello World!"}]
        assert content["msteams"]["width"] == "Full"
        assert content["msteams"]["entities"][0]["mentioned"]["id"] == "jane.doe@example.com"
        json.dumps(message)

    def test_nested_nodes_serialize(self):
        banner = build_status_banner("x", "success", [build_columnset([{"a": "1"}], ["a"])])
        body = assemble_card([banner], []).to_content()["body"]

        columnset = body[0]["items"][2]
        assert columnset["type"] == "ColumnSet"
        assert columnset["columns"][0]["type"] == "Column"
        assert columnset["columns"][0]["items"][1] == {
            "type": "TextBlock",
            "text": "1",
            "color": "default",
            "spacing": "none",
        }

    def test_card_from_wire_body(self):
        card = Card(body=[{"type": "TextBlock", "text": "hi"}, {"type": "ColumnSet", "columns": []}])
        assert isinstance(card.body[0], TextBlock)
        assert isinstance(card.body[1], ColumnSet)

    def test_notification_appends_ping(self):
        card = build_notification([TextBlock(text="hi")], [JANE], "s")
        assert [node.text for node in card.body] == ["hi", "Ping <at>Jane</at>"]
        assert len(card.entities) == 1

    def test_notification_without_recipients(self):
        card = build_notification([TextBlock(text="hi")])
        assert len(card.body) == 1
        assert card.entities == []


class TestRunReportCard:

    def test_success_card(self, completed_tasks):
        report = join_report(*completed_tasks)
        card = build_run_report_card(report, RunStatus.SUCCESS, "proj", "2024-06", [JANE])

        banner, ping = card.body
        assert card.summary == "proj/2024-06: SUCCESS"
        assert banner.style == "good"
        assert banner.items[0].text == "proj/2024-06"
        columnset = banner.items[2]
        assert [column.items[0].text for column in columnset.columns] == ["name", "progress", "minutes"]
        assert [cell.text for cell in columnset.columns[2].items[1:]] == ["0.5", "1.5", "2.5"]
        assert ping.text == "Ping <at>Jane</at>"

    def test_error_card(self, completed_tasks):
        report = join_report(*completed_tasks)
        card = build_run_report_card(report, RunStatus.FAILED, "proj", "run", error_message="disk full")

        (banner,) = card.body
        assert banner.style == "attention"
        assert banner.items[-1].text == "disk full"
