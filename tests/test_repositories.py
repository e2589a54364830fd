"""Tests for the store-backed repositories."""

from unittest.mock import MagicMock

import pytest
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from conftest import make_exercise, make_session
from medstride.errors import ExerciseNotFoundError
from medstride.models import AnswerLog, Subject
from medstride.repositories import DEFAULT_SUBJECTS, CosmosKeyValueStore, answers_key
from medstride.repositories.exercise_repository import EXERCISES_KEY
from medstride.repositories.session_repository import SESSIONS_KEY
from medstride.repositories.subject_repository import SUBJECTS_KEY


class TestCosmosKeyValueStore:
    """Tests for the Cosmos document mapping."""

    def test_get_returns_value(self):
        container = MagicMock()
        container.read_item.return_value = {"id": "k", "value": [1, 2], "_etag": "x"}
        store = CosmosKeyValueStore(container=container)

        assert store.get("k") == [1, 2]
        container.read_item.assert_called_once_with(item="k", partition_key="k")

    def test_get_missing_key(self):
        container = MagicMock()
        container.read_item.side_effect = CosmosResourceNotFoundError(message="missing")
        assert CosmosKeyValueStore(container=container).get("k") is None

    def test_set_upserts_document(self):
        container = MagicMock()
        CosmosKeyValueStore(container=container).set("k", {"a": 1})
        container.upsert_item.assert_called_once_with(body={"id": "k", "value": {"a": 1}})

    def test_delete_missing_key_is_ignored(self):
        container = MagicMock()
        container.delete_item.side_effect = CosmosResourceNotFoundError(message="missing")
        CosmosKeyValueStore(container=container).delete("k")
        container.delete_item.assert_called_once_with(item="k", partition_key="k")


class TestExerciseRepository:
    """Tests for ExerciseRepository."""

    def test_empty_store(self, repos):
        assert repos["exercises"].list_all() == []

    def test_round_trip(self, repos):
        repo = repos["exercises"]
        repo.add(make_exercise("ex1"))
        repo.add(make_exercise("ex2", easinessFactor=2.1))

        loaded = repo.list_all()
        assert [ex.id for ex in loaded] == ["ex1", "ex2"]
        assert loaded[1].easinessFactor == 2.1
        assert repo.get_by_id("ex2").title == "Exercise ex2"

    def test_get_by_id_missing(self, repos):
        with pytest.raises(ExerciseNotFoundError):
            repos["exercises"].get_by_id("nope")

    def test_legacy_records_are_backfilled(self, repos, memory_store):
        legacy = make_exercise().model_dump(mode="json")
        for key in ("interval", "repetitions", "easinessFactor", "reviewCount"):
            legacy.pop(key)
        legacy["successRate"] = None
        legacy["lastReviewedAt"] = None
        memory_store.set(EXERCISES_KEY, [legacy])

        exercise = repos["exercises"].list_all()[0]

        assert exercise.interval == 1
        assert exercise.repetitions == 0
        assert exercise.easinessFactor == 2.5
        assert exercise.reviewCount == 0
        assert exercise.successRate == 0.0

    def test_unreadable_records_are_skipped(self, repos, memory_store):
        good = make_exercise().model_dump(mode="json")
        memory_store.set(EXERCISES_KEY, [good, {"id": "broken"}, "not-an-object"])
        assert [ex.id for ex in repos["exercises"].list_all()] == ["ex1"]

    def test_write_keeps_unreadable_records(self, repos, memory_store):
        broken = make_exercise("ex2").model_dump(mode="json")
        broken["questions"][0]["options"] = ["only one"]
        memory_store.set(EXERCISES_KEY, [make_exercise("ex1").model_dump(mode="json"), broken])

        repos["exercises"].add(make_exercise("ex3"))

        stored = memory_store.get(EXERCISES_KEY)
        assert [item["id"] for item in stored] == ["ex1", "ex3", "ex2"]
        assert stored[2] == broken
        assert [ex.id for ex in repos["exercises"].list_all()] == ["ex1", "ex3"]

    def test_readable_record_replaces_unreadable_one_with_same_id(self, repos, memory_store):
        memory_store.set(EXERCISES_KEY, [{"id": "ex1", "title": None}])

        repos["exercises"].save_all([make_exercise("ex1")])

        assert len(memory_store.get(EXERCISES_KEY)) == 1
        assert repos["exercises"].get_by_id("ex1").title == "Exercise ex1"

    def test_write_can_drop_unreadable_records(self, repos, memory_store):
        memory_store.set(EXERCISES_KEY, [{"id": "broken"}])
        repos["exercises"].save_all([make_exercise("ex1")], keep_unreadable=False)
        assert [item["id"] for item in memory_store.get(EXERCISES_KEY)] == ["ex1"]

    def test_non_list_value_is_ignored(self, repos, memory_store):
        memory_store.set(EXERCISES_KEY, {"ex1": "oops"})
        assert repos["exercises"].list_all() == []


class TestSessionRepository:
    """Tests for SessionRepository."""

    def test_round_trip(self, repos, memory_store):
        repo = repos["sessions"]
        sessions = [make_session(results={"q1": True}), make_session(results={"q2": False})]
        repo.save_all(sessions)

        assert repo.list_all() == sessions
        assert memory_store.writes == [SESSIONS_KEY]

    def test_write_keeps_unreadable_sessions(self, repos, memory_store):
        broken = {"id": "old", "exerciseId": "ex1", "score": -3}
        memory_store.set(SESSIONS_KEY, [broken])

        repos["sessions"].save_all([make_session(session_id="new")])

        assert [item["id"] for item in memory_store.get(SESSIONS_KEY)] == ["new", "old"]
        assert [s.id for s in repos["sessions"].list_all()] == ["new"]

    def test_answer_snapshot(self, repos, memory_store):
        repo = repos["sessions"]
        answers = [AnswerLog(questionId="q1", selectedAnswer=None, isCorrect=False, timeSpent=0)]

        assert repo.get_answers("ex1") is None
        repo.save_answers("ex1", answers)
        assert answers_key("ex1") == "quiz-answers-ex1"
        assert answers_key("ex1") in memory_store.data
        assert repo.get_answers("ex1") == answers

        repo.delete_answers("ex1")
        assert repo.get_answers("ex1") is None

    def test_unreadable_snapshot(self, repos, memory_store):
        memory_store.set(answers_key("ex1"), [{"questionId": ""}])
        assert repos["sessions"].get_answers("ex1") is None


class TestSubjectRepository:
    """Tests for SubjectRepository."""

    def test_defaults_apply_without_custom_catalog(self, repos):
        repo = repos["subjects"]
        assert repo.load_custom() is None
        assert repo.list_all() == DEFAULT_SUBJECTS
        assert repo.get_by_id("fisiologia-renal").shortName == "Fisiologia Renal"

    def test_custom_catalog_replaces_defaults(self, repos):
        repo = repos["subjects"]
        repo.save_all([Subject(id="cardio", name="Cardiology", shortName="Cardio")])

        assert [s.id for s in repo.list_all()] == ["cardio"]
        assert repo.get_by_id("fisiologia-renal") is None

        repo.reset()
        assert repo.list_all() == DEFAULT_SUBJECTS

    def test_unreadable_catalog_falls_back(self, repos, memory_store):
        memory_store.set(SUBJECTS_KEY, [{"id": "x"}])
        assert repos["subjects"].list_all() == DEFAULT_SUBJECTS

    def test_list_all_returns_a_copy(self, repos):
        repos["subjects"].list_all().clear()
        assert len(DEFAULT_SUBJECTS) == 20
