"""Repositories module for data access layer."""

from .kv_store import (
    KeyValueStore,
    CosmosKeyValueStore,
    get_store,
)
from .exercise_repository import (
    ExerciseRepository,
    get_exercise_repository,
)
from .session_repository import (
    SessionRepository,
    answers_key,
    get_session_repository,
)
from .subject_repository import (
    DEFAULT_SUBJECTS,
    SubjectRepository,
    get_subject_repository,
)

__all__ = [
    "KeyValueStore",
    "CosmosKeyValueStore",
    "get_store",
    "ExerciseRepository",
    "get_exercise_repository",
    "SessionRepository",
    "answers_key",
    "get_session_repository",
    "DEFAULT_SUBJECTS",
    "SubjectRepository",
    "get_subject_repository",
]
