"""Pytest configuration for global fixtures and logging setup."""
from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable, Dict

import pytest
from fastapi.testclient import TestClient

_TMP_DIR = Path(tempfile.mkdtemp(prefix="practice-coach-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["LOG_DIR"] = str(_TMP_DIR / "logs")
os.environ["ANTHROPIC_API_KEY"] = os.environ.get("ANTHROPIC_API_KEY") or "test-anthropic-key"

from app.logging_config import configure_logging

configure_logging()

from app.database import Base, SessionLocal, engine
from app.main import app
from app.models.database_models import DailyHabit, PracticeSession, UserProfile
from app.models.schemas import SessionRead
from app.services.completion_client import CompletionClient, get_completion_client

Base.metadata.create_all(engine)

FIXTURES_DIR = Path(__file__).parent / "fixtures"

FULL_CHECKLIST = {
    "warmedUp": True,
    "practicedSlow": True,
    "recorded": True,
    "tookBreaks": True,
    "reviewedMistakes": True,
}


class ScriptedMessages:
    """Stand-in for ``Anthropic().messages`` returning canned replies in order.

    A reply that is an exception instance is raised instead of returned.
    """

    def __init__(self, replies: list[str | BaseException | None]):
        self.replies = list(replies)
        self.calls: list[dict[str, Any]] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        text = self.replies.pop(0)
        if isinstance(text, BaseException):
            raise text
        content = [] if text is None else [SimpleNamespace(type="text", text=text)]
        return SimpleNamespace(content=content)


@pytest.fixture(autouse=True)
def clean_database():
    """Every test starts from empty tables."""

    db = SessionLocal()
    try:
        for model in (PracticeSession, UserProfile, DailyHabit):
            db.query(model).delete()
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture(scope="session")
def test_client() -> TestClient:
    """Provide a FastAPI test client."""

    return TestClient(app)


@pytest.fixture()
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def scripted_client() -> Callable[..., CompletionClient]:
    """Build a ``CompletionClient`` whose SDK replies with the given texts."""

    def factory(*replies: str | BaseException | None, api_key: str | None = "test-key") -> CompletionClient:
        messages = ScriptedMessages(list(replies))
        client = CompletionClient(
            api_key=api_key,
            model="claude-test",
            client=SimpleNamespace(messages=messages) if api_key else None,
        )
        client.messages = messages  # exposed for assertions
        return client

    return factory


@pytest.fixture()
def override_completion_client():
    """Swap the client used by the API routes; cleared after the test."""

    def apply(client: CompletionClient) -> CompletionClient:
        app.dependency_overrides[get_completion_client] = lambda: client
        return client

    yield apply
    app.dependency_overrides.pop(get_completion_client, None)


@pytest.fixture()
def session_factory() -> Callable[..., SessionRead]:
    """In-memory ``SessionRead`` objects for pure unit tests."""

    counter = {"id": 0}

    def factory(**overrides: Any) -> SessionRead:
        counter["id"] += 1
        data: Dict[str, Any] = {
            "id": counter["id"],
            "created_at": datetime(2025, 10, 8, 18, 30) - timedelta(days=counter["id"] - 1),
            "micro_objective": "Cambio limpio de C a G a 60 bpm",
            "technical_focus": "Técnica",
            "duration_min": 30,
            "bpm_target": 80,
            "bpm_achieved": 75,
            "quality_rating": 4,
            "rpe": 6,
            "mindset_checklist": FULL_CHECKLIST,
            "reflection": None,
        }
        data.update(overrides)
        return SessionRead.model_validate(data)

    return factory


@pytest.fixture()
def stored_session(db_session) -> Callable[..., PracticeSession]:
    """Insert a practice session row and return it."""

    def factory(**overrides: Any) -> PracticeSession:
        data: Dict[str, Any] = {
            "created_at": datetime.utcnow(),
            "micro_objective": "Escala pentatónica menor en 3 cuerdas",
            "technical_focus": "Técnica",
            "duration_min": 30,
            "bpm_target": 80,
            "bpm_achieved": 80,
            "quality_rating": 4,
            "rpe": 5,
            "mindset_checklist": dict(FULL_CHECKLIST),
            "reflection": None,
        }
        data.update(overrides)
        row = PracticeSession(**data)
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row

    return factory


@pytest.fixture(scope="session")
def data_analysis_fixture() -> Dict[str, Any]:
    """Return a Step 1 data analysis reply as the model would produce it."""

    with (FIXTURES_DIR / "data_analysis_response.json").open("r", encoding="utf-8") as fh:
        return json.load(fh)
