"""Repository for exercises.

All exercises live under one store key as a JSON list. Older records missing
scheduling fields are back-filled with defaults by the Exercise model; records
that cannot be read at all are skipped on load and written back unchanged on save.
"""

import logging

from medstride.errors import ExerciseNotFoundError
from medstride.models import Exercise
from medstride.repositories.kv_store import KeyValueStore, get_store
from medstride.repositories.records import load_records, merge_unreadable

logger = logging.getLogger(__name__)

EXERCISES_KEY = "medical-exercises"


class ExerciseRepository:
    """Repository for Exercise persistence."""

    def __init__(self, store: KeyValueStore | None = None):
        """Initialize the repository with an optional store."""
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        """Get the store, lazily initializing if needed."""
        if self._store is None:
            self._store = get_store()
        return self._store

    def list_all(self) -> list[Exercise]:
        """Load every readable exercise in stored order."""
        exercises, _ = load_records(self.store.get(EXERCISES_KEY), Exercise, EXERCISES_KEY)
        return exercises

    def save_all(self, exercises: list[Exercise], keep_unreadable: bool = True) -> None:
        """Replace the stored exercises.

        Stored records that could not be read are written back unchanged
        unless `keep_unreadable` is False or one of `exercises` has their id.
        """
        records = [ex.model_dump(mode="json") for ex in exercises]
        if keep_unreadable:
            _, unreadable = load_records(self.store.get(EXERCISES_KEY), Exercise, EXERCISES_KEY)
            records = merge_unreadable(records, unreadable)
        self.store.set(EXERCISES_KEY, records)

    def get_by_id(self, exercise_id: str) -> Exercise:
        """Get an exercise by ID."""
        for exercise in self.list_all():
            if exercise.id == exercise_id:
                return exercise
        raise ExerciseNotFoundError(f"Exercise with ID {exercise_id} not found")

    def add(self, exercise: Exercise) -> Exercise:
        exercises = self.list_all()
        exercises.append(exercise)
        self.save_all(exercises)
        return exercise


# Singleton instance
_exercise_repository: ExerciseRepository | None = None


def get_exercise_repository() -> ExerciseRepository:
    """Get the exercise repository singleton."""
    global _exercise_repository
    if _exercise_repository is None:
        _exercise_repository = ExerciseRepository()
    return _exercise_repository
