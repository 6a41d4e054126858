"""Tests for the run orchestrator."""

import json

import httpx
import pytest

from runreport.errors import JoinCardinalityError, TaskExecutionError, UploadError
from runreport.models import Recipient, RunStatus, TaskMeta, TaskRecord, TaskSituation
from runreport.notify import NotifyResult, TeamsNotifier
from runreport.pipeline import INVALIDATE_GRACE_SECONDS, RunOrchestrator, blob_prefix, store_run_data
from runreport.report import aggregate_report
from runreport.runner import MockTaskRunner

from .conftest import WEBHOOK_URL, WebhookRecorder


class RecordingNotifier(TeamsNotifier):
    """Notifier collecting cards instead of posting them."""

    def __init__(self, success=True):
        super().__init__(WEBHOOK_URL)
        self.success = success
        self.cards = []

    def send_card(self, card):
        self.cards.append(card)
        return NotifyResult(success=self.success, status_code=202 if self.success else 500)


@pytest.fixture
def recording_notifier():
    return RecordingNotifier()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def orchestrator(runner, store, recording_notifier, sleeps):
    return RunOrchestrator(runner, store, recording_notifier, sleep=sleeps.append)


def _run(orchestrator, container, **kwargs):
    return orchestrator.run(
        run_name="2024-06",
        project_name="proj",
        container_url=str(container),
        **kwargs,
    )


def _banner(card):
    return card.body[0]


class TestSuccessfulRun:

    def test_reports_and_uploads(self, orchestrator, runner, container, recording_notifier):
        outcome = _run(orchestrator, container, upload_targets=["clean_data"])

        assert outcome.status is RunStatus.SUCCESS
        assert outcome.noop is False
        assert [row.minutes for row in outcome.report.rows] == ["0.5", "1.5", "2.5"]
        assert "execute" in runner.calls

        prefix = container / "proj/outputs/2024-06"
        assert (prefix / "clean_data.json").read_bytes() == b"RDS-clean"
        report = json.loads((prefix / "run_report.json").read_text())
        assert [row["name"] for row in report["rows"]] == ["raw_data", "clean_data", "summary"]
        assert len(outcome.uploaded) == 2

        (card,) = recording_notifier.cards
        assert _banner(card).style == "good"
        assert _banner(card).items[1].text == "SUCCESS"
        assert outcome.notified is True

    def test_uploads_folders(self, orchestrator, container, tmp_path):
        folder = tmp_path / "validation"
        folder.mkdir()
        (folder / "checks.csv").write_text("ok")

        _run(orchestrator, container, upload_folders=[folder])

        assert (container / "proj/outputs/2024-06/validation/checks.csv").read_text() == "ok"

    def test_pings_recipients(self, orchestrator, container, recording_notifier):
        _run(orchestrator, container, ping=[Recipient(name="Jane", identifier="jane@example.com")])

        (card,) = recording_notifier.cards
        assert card.body[-1].text == "Ping <at>Jane</at>"
        assert card.entities[0].mentioned.identifier == "jane@example.com"

    def test_forced_overwrites(self, orchestrator, container):
        prefix = container / "proj/outputs/2024-06"
        prefix.mkdir(parents=True)
        (prefix / "clean_data.json").write_bytes(b"old")

        _run(orchestrator, container, upload_targets=["clean_data"])
        assert (prefix / "clean_data.json").read_bytes() == b"old"

        _run(orchestrator, container, upload_targets=["clean_data"], forced=True)
        assert (prefix / "clean_data.json").read_bytes() == b"RDS-clean"

    def test_notify_failure_does_not_change_outcome(self, runner, store, container):
        notifier = RecordingNotifier(success=False)
        outcome = _run(RunOrchestrator(runner, store, notifier, sleep=lambda s: None), container)

        assert outcome.status is RunStatus.SUCCESS
        assert outcome.notified is False

    def test_webhook_payload(self, runner, store, container):
        webhook = WebhookRecorder()
        notifier = TeamsNotifier(WEBHOOK_URL, client=httpx.Client(transport=httpx.MockTransport(webhook)))

        _run(RunOrchestrator(runner, store, notifier), container)

        (payload,) = webhook.payloads
        assert payload["summary"] == "proj/2024-06: SUCCESS"
        assert payload["attachments"][0]["content"]["body"][0]["style"] == "good"


class TestNothingToDo:

    def test_no_pending_tasks(self, completed_tasks, store, recording_notifier, container):
        progress, meta = completed_tasks
        runner = MockTaskRunner(
            progress=progress,
            meta=meta,
            situation=[TaskSituation(name=record.name, flags={"record": False, "never": False}) for record in progress],
        )

        outcome = _run(RunOrchestrator(runner, store, recording_notifier), container)

        assert outcome.noop is True
        assert outcome.status is None
        assert runner.calls == ["situation_report"]
        assert recording_notifier.cards == []
        assert list(container.iterdir()) == []

    def test_never_flag_is_not_pending(self):
        assert TaskSituation(name="a", flags={"never": True, "always": True}).pending is False
        assert TaskSituation(name="a", flags={"depend": True}).pending is True
        assert TaskSituation(name="a", flags={"depend": None}).pending is False


class TestInvalidate:

    def test_waits_then_invalidates(self, orchestrator, runner, container, sleeps):
        _run(orchestrator, container, invalidate=True)

        assert sleeps == [INVALIDATE_GRACE_SECONDS]
        assert INVALIDATE_GRACE_SECONDS == 5
        assert runner.calls[0] == "invalidate_all"
        assert "situation_report" not in runner.calls
        assert "execute" in runner.calls


class TestFailedRun:

    def test_notifies_then_raises(self, completed_tasks, store, recording_notifier, container):
        progress, meta = completed_tasks
        boom = RuntimeError("disk full")
        runner = MockTaskRunner(progress=progress, meta=meta, error=boom)

        with pytest.raises(TaskExecutionError, match="disk full") as exc_info:
            _run(RunOrchestrator(runner, store, recording_notifier), container, upload_targets=["clean_data"])

        assert exc_info.value.__cause__ is boom
        (card,) = recording_notifier.cards
        banner = _banner(card)
        assert banner.style == "attention"
        assert banner.items[1].text == "FAILED"
        assert banner.items[-1].text == "disk full"
        assert not any(call.startswith("read_artifact") for call in runner.calls)
        assert list(container.iterdir()) == []

    def test_report_failure_after_execution_error(self, store, recording_notifier, container):
        runner = MockTaskRunner(
            progress=[TaskRecord(name="a", progress="errored"), TaskRecord(name="a", progress="errored")],
            error=RuntimeError("boom"),
        )

        with pytest.raises(TaskExecutionError):
            _run(RunOrchestrator(runner, store, recording_notifier), container)

        (card,) = recording_notifier.cards
        assert _banner(card).items[-1].text == "boom"

    def test_errored_tasks_without_exception(self, store, recording_notifier, container):
        runner = MockTaskRunner(
            progress=[TaskRecord(name="a", progress="completed"), TaskRecord(name="b", progress="errored")],
            meta=[TaskMeta(name="a", seconds=10), TaskMeta(name="b", error="bad input")],
        )

        outcome = _run(RunOrchestrator(runner, store, recording_notifier), container)

        assert outcome.status is RunStatus.FAILED
        assert outcome.uploaded == []
        assert _banner(recording_notifier.cards[0]).style == "attention"

    def test_duplicate_task_names_abort(self, store, recording_notifier, container):
        runner = MockTaskRunner(progress=[TaskRecord(name="a", progress="completed")] * 2)

        with pytest.raises(JoinCardinalityError):
            _run(RunOrchestrator(runner, store, recording_notifier), container)
        assert recording_notifier.cards == []

    def test_upload_failure_notifies_then_raises(self, orchestrator, container, recording_notifier):
        with pytest.raises(UploadError):
            _run(orchestrator, container, upload_folders=[container / "missing"])

        banner = _banner(recording_notifier.cards[0])
        assert banner.items[1].text == "FAILED"
        assert banner.items[-1].text.startswith("Upload failed")


class TestSkippedRun:

    def test_notifies_without_upload(self, store, recording_notifier, container):
        runner = MockTaskRunner(progress=[TaskRecord(name="a", progress="skipped")], meta=[TaskMeta(name="a")])

        outcome = _run(RunOrchestrator(runner, store, recording_notifier), container)

        assert outcome.status is RunStatus.SKIPPED
        assert outcome.uploaded == []
        assert _banner(recording_notifier.cards[0]).style == "accent"


class TestStoreRunData:

    def test_paths(self, runner, store, container):
        report = aggregate_report(runner)
        stored = store_run_data(runner, store, report, "r1", "proj", str(container), ["summary"])

        assert blob_prefix("proj", "r1") == "proj/outputs/r1"
        assert stored == [
            str(container / "proj/outputs/r1/summary.json"),
            str(container / "proj/outputs/r1/run_report.json"),
        ]

    def test_requires_container(self, runner, store):
        with pytest.raises(UploadError, match="No container URL"):
            store_run_data(runner, store, aggregate_report(runner), "r1", "proj", "")
