"""Repository for study sessions and per-exercise answer snapshots."""

import logging

from pydantic import TypeAdapter, ValidationError

from medstride.models import AnswerLog, StudySession
from medstride.repositories.kv_store import KeyValueStore, get_store
from medstride.repositories.records import load_records, merge_unreadable

logger = logging.getLogger(__name__)

SESSIONS_KEY = "study-sessions"
ANSWERS_KEY_PREFIX = "quiz-answers-"

_answers_adapter = TypeAdapter(list[AnswerLog])


def answers_key(exercise_id: str) -> str:
    """Store key of the latest answer log of an exercise."""
    return f"{ANSWERS_KEY_PREFIX}{exercise_id}"


class SessionRepository:
    """Repository for StudySession history."""

    def __init__(self, store: KeyValueStore | None = None):
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        if self._store is None:
            self._store = get_store()
        return self._store

    def list_all(self) -> list[StudySession]:
        sessions, _ = load_records(self.store.get(SESSIONS_KEY), StudySession, SESSIONS_KEY)
        return sessions

    def save_all(self, sessions: list[StudySession], keep_unreadable: bool = True) -> None:
        """Replace the session history, writing back sessions that could not be read."""
        records = [s.model_dump(mode="json") for s in sessions]
        if keep_unreadable:
            _, unreadable = load_records(self.store.get(SESSIONS_KEY), StudySession, SESSIONS_KEY)
            records = merge_unreadable(records, unreadable)
        self.store.set(SESSIONS_KEY, records)

    def get_answers(self, exercise_id: str) -> list[AnswerLog] | None:
        """Return the latest answer snapshot of an exercise, if any."""
        raw = self.store.get(answers_key(exercise_id))
        if raw is None:
            return None
        try:
            return _answers_adapter.validate_python(raw)
        except ValidationError as e:
            logger.warning("Ignoring unreadable answers for exercise %s: %s", exercise_id, e.error_count())
            return None

    def save_answers(self, exercise_id: str, answers: list[AnswerLog]) -> None:
        self.store.set(answers_key(exercise_id), [a.model_dump(mode="json") for a in answers])

    def delete_answers(self, exercise_id: str) -> None:
        self.store.delete(answers_key(exercise_id))


# Singleton instance
_session_repository: SessionRepository | None = None


def get_session_repository() -> SessionRepository:
    """Get the session repository singleton."""
    global _session_repository
    if _session_repository is None:
        _session_repository = SessionRepository()
    return _session_repository
