"""Shared fixtures for runreport tests."""

import json

import httpx
import pytest

from runreport.models import TaskMeta, TaskRecord
from runreport.notify import TeamsNotifier
from runreport.runner import MockTaskRunner
from runreport.storage import LocalBlobStore

WEBHOOK_URL = "https://example.test/webhook"


class WebhookRecorder:
    """Record posted payloads and answer with a fixed status."""

    def __init__(self, status_code=202, body="accepted"):
        self.status_code = status_code
        self.body = body
        self.payloads = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.payloads.append(json.loads(request.content))
        return httpx.Response(self.status_code, text=self.body)


@pytest.fixture
def webhook():
    return WebhookRecorder()


@pytest.fixture
def notifier(webhook):
    client = httpx.Client(transport=httpx.MockTransport(webhook))
    return TeamsNotifier(WEBHOOK_URL, client=client)


@pytest.fixture
def completed_tasks():
    """Three completed tasks taking 30, 90 and 150 seconds."""
    names = ["raw_data", "clean_data", "summary"]
    progress = [TaskRecord(name=name, progress="completed", type="stem") for name in names]
    meta = [TaskMeta(name=name, seconds=seconds) for name, seconds in zip(names, [30, 90, 150])]
    return progress, meta


@pytest.fixture
def runner(completed_tasks):
    progress, meta = completed_tasks
    return MockTaskRunner(
        progress=progress,
        meta=meta,
        artifacts={"clean_data": b"RDS-clean", "summary": b"RDS-summary"},
    )


@pytest.fixture
def container(tmp_path):
    path = tmp_path / "container"
    path.mkdir()
    return path


@pytest.fixture
def store():
    return LocalBlobStore()
