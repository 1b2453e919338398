import json

import pytest
from fastapi.testclient import TestClient

from student_api.main import create_app
from student_api.store import StudentStore
from student_api.summary import SummaryGenerator


class FakeResponse:
    """Minimal stand-in for `requests.Response` used by the summary client."""

    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._text = text if text is not None else json.dumps(body)

    def json(self):
        return json.loads(self._text)


class FakeSession:
    """Fake downstream endpoint: replays queued outcomes and records calls."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def ollama_reply(content):
    return FakeResponse(200, {"model": "llama2", "message": {"role": "assistant", "content": content}, "done": True})


@pytest.fixture
def store():
    return StudentStore()


@pytest.fixture
def fake_session():
    return FakeSession(ollama_reply("A curious student."))


@pytest.fixture
def summarizer(fake_session):
    return SummaryGenerator(
        url="http://summary.test/api/chat",
        model="llama2",
        timeout_seconds=2.0,
        session=fake_session,
    )


@pytest.fixture
def client(store, summarizer):
    """Fresh app, store and fake summary service for every test."""
    return TestClient(create_app(store=store, summarizer=summarizer))


@pytest.fixture
def no_sleep(monkeypatch):
    delays = []
    monkeypatch.setattr("student_api.summary.time.sleep", delays.append)
    return delays
