"""Shared test fixtures for FakeSO tests."""

import os
import tempfile

import pytest

# Use temp DB for tests; must be set before importing app modules
_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
os.environ["FAKESO_DATA_DIR"] = os.path.dirname(_tmp.name)

import config as fakeso_config  # noqa: E402

fakeso_config.DB_PATH = _tmp.name

from broadcast import Broadcaster  # noqa: E402
from fastapi.encoders import jsonable_encoder  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from server import app, configure  # noqa: E402

repo = configure(_tmp.name)
client = TestClient(app)


class RecordingBroadcaster(Broadcaster):
    """Broadcaster that also keeps every emitted event."""

    def __init__(self):
        super().__init__()
        self.events = []

    async def emit(self, event, data):
        await super().emit(event, data)
        self.events.append((event, jsonable_encoder(data)))


def make_account(username="alice", email=None, **overrides):
    data = {"username": username, "email": email or f"{username}@example.com"}
    data.update(overrides)
    return client.post("/accounts", json=data)


def make_question(**overrides):
    """Create a test question with defaults."""
    data = {
        "title": "Test",
        "text": "Body",
        "tags": [{"name": "python"}],
        "asked_by": "tester",
    }
    data.update(overrides)
    return client.post("/questions", json=data)


def make_thread(a="alice", b="bob"):
    make_account(a)
    make_account(b)
    return client.post("/threads", json={"accounts": [a, b]})


@pytest.fixture(autouse=True)
def fresh_db():
    """Reset DB and event log before each test."""
    repo.clear()
    app.state.broadcaster = RecordingBroadcaster()


@pytest.fixture
def events(fresh_db):
    return app.state.broadcaster.events
