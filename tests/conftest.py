import json
import logging
from pathlib import Path
from typing import List

import pytest

from linear_reflect.common import compute_hmac_sha256
from linear_reflect.config import RelayConfig
from linear_reflect.notes import DispatchResult, Note

RESOURCES = Path(__file__).parent / "resources"

TEST_SECRET = "lin_wh_test_secret"


class FakeNotesClient:
    """Records notes instead of calling Reflect."""

    def __init__(self, result: DispatchResult = DispatchResult(ok=True, status_code=200)):
        self.result = result
        self.notes: List[Note] = []

    def create_note(self, note: Note) -> DispatchResult:
        self.notes.append(note)
        return self.result


def sign(body: bytes, secret: str = TEST_SECRET) -> str:
    return compute_hmac_sha256(body, secret)


def encode(payload) -> bytes:
    return json.dumps(payload).encode("utf-8")


def load_resource(name: str) -> bytes:
    return (RESOURCES / name).read_bytes()


@pytest.fixture
def config() -> RelayConfig:
    return RelayConfig(
        webhook_secret=TEST_SECRET,
        access_token="reflect-token",
        graph_id="graph-123",
        notes_api_url="https://notes.test",
        log_dir=None,
    )


@pytest.fixture
def notes_client() -> FakeNotesClient:
    return FakeNotesClient()


@pytest.fixture
def restore_logging():
    """Undo setup_logging's changes to the root logger."""
    from linear_reflect.common import logging_utils

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
    logging_utils._log_dir = None
