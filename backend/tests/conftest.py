"""Shared test fixtures - every test works on its own dialogue file under tmp_path."""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from app.services.dialogue_store import DialogueStore, get_dialogue_store
from app.services.editor_service import EditorSession, get_editor_session

SAMPLE_DOCUMENT = {
    "start": {
        "speaker": "A",
        "text": "Hi",
        "choices": [{"speaker": "Player", "text": "Bye", "next": "end"}],
        "position": {"x": 0, "y": 0},
    },
    "end": {"speaker": "B", "text": "Bye!", "position": {"x": 400, "y": 0}},
}


def write_document(path, document: dict) -> None:
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")


def read_document(path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def dialogue_file(tmp_path):
    """A dialogue file seeded with the two-node sample document."""
    path = tmp_path / "dialogue.json"
    write_document(path, SAMPLE_DOCUMENT)
    return path


@pytest.fixture
def store(dialogue_file):
    return DialogueStore(dialogue_file)


@pytest.fixture
def session(store):
    """An editor session with the sample document already loaded."""
    session = EditorSession(store)
    assert session.load().success
    return session


@pytest.fixture
async def client(store):
    """Async HTTP test client bound to a fresh session over the tmp file."""
    from app.main import app

    session = EditorSession(store)
    app.dependency_overrides[get_dialogue_store] = lambda: store
    app.dependency_overrides[get_editor_session] = lambda: session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
