"""Pytest configuration and fixtures."""

import copy
import json
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import pytest

# Keep the service off any real Cosmos account during tests
os.environ.setdefault("COSMOS_EMULATOR", "false")
os.environ.setdefault("STUDY_TIMEZONE", "UTC")

from medstride.models import AnswerLog, Exercise, Question, StudySession  # noqa: E402
from medstride.repositories import (  # noqa: E402
    ExerciseRepository,
    SessionRepository,
    SubjectRepository,
)


NOW = datetime(2025, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


@dataclass
class MemoryStore:
    """Dict-backed key-value store; values round-trip through JSON like the real store."""

    data: dict[str, str] = field(default_factory=dict)
    writes: list[str] = field(default_factory=list)

    def get(self, key: str) -> Any | None:
        raw = self.data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = json.dumps(value)
        self.writes.append(key)

    def delete(self, key: str) -> None:
        self.data.pop(key, None)
        self.writes.append(key)


def make_exercise(exercise_id="ex1", subject_id="s1", question_ids=("q1", "q2", "q3"), **overrides) -> Exercise:
    questions = [
        Question(id=qid, question=f"Question {qid}?", options=["A", "B", "C", "D"], correctAnswer=0)
        for qid in question_ids
    ]
    data = {
        "id": exercise_id,
        "subjectId": subject_id,
        "title": f"Exercise {exercise_id}",
        "questions": questions,
        "createdAt": "2025-03-01T00:00:00Z",
        "nextReviewAt": "2025-03-01T00:00:00Z",
    }
    data.update(overrides)
    return Exercise(**data)


def make_session(exercise_id="ex1", results=None, session_id=None, completed_at="2025-03-05T10:00:00Z") -> StudySession:
    """Build a session from {questionId: isCorrect}."""
    results = results or {}
    answers = [
        AnswerLog(questionId=qid, selectedAnswer=0 if ok else 1, isCorrect=ok, timeSpent=1000)
        for qid, ok in results.items()
    ]
    kwargs = {}
    if session_id:
        kwargs["id"] = session_id
    return StudySession(
        exerciseId=exercise_id,
        completedAt=completed_at,
        score=sum(1 for ok in results.values() if ok),
        timeSpent=1000 * len(answers),
        answersLog=answers,
        **kwargs,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def repos(memory_store):
    return {
        "exercises": ExerciseRepository(store=memory_store),
        "sessions": SessionRepository(store=memory_store),
        "subjects": SubjectRepository(store=memory_store),
    }


@pytest.fixture
def api_repos(monkeypatch, repos, memory_store, now):
    """Point every router at the in-memory repositories and freeze the clock."""
    from medstride.routers import backup, exercises, mistakes, study, subjects

    for module in (backup, exercises, mistakes, study):
        if hasattr(module, "get_exercise_repository"):
            monkeypatch.setattr(module, "get_exercise_repository", lambda: repos["exercises"])
        if hasattr(module, "get_session_repository"):
            monkeypatch.setattr(module, "get_session_repository", lambda: repos["sessions"])
    monkeypatch.setattr(mistakes, "get_subject_repository", lambda: repos["subjects"])
    monkeypatch.setattr(subjects, "get_subject_repository", lambda: repos["subjects"])
    monkeypatch.setattr(backup, "get_store", lambda: memory_store)
    for module in (exercises, study):
        monkeypatch.setattr(module, "utc_now", lambda: copy.copy(now))
    return repos


@pytest.fixture
def client(api_repos):
    from fastapi.testclient import TestClient

    from medstride.main import app

    return TestClient(app)
