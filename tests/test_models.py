"""Tests for request and record models."""

import pytest
from pydantic import ValidationError

from medstride.config import StudySettings
from medstride.models import (
    Exercise,
    ExerciseCreate,
    ExerciseUpdate,
    Question,
    QuizCompletionRequest,
    RescheduleRequest,
)


def question(**overrides):
    data = {"question": "Which?", "options": ["A", "B"], "correctAnswer": 1}
    data.update(overrides)
    return data


class TestQuestion:
    def test_generated_id(self):
        assert Question(**question()).id.startswith("q_")

    def test_correct_answer_must_index_options(self):
        with pytest.raises(ValidationError):
            Question(**question(correctAnswer=2))

    def test_needs_two_options(self):
        with pytest.raises(ValidationError):
            Question(**question(options=["A"], correctAnswer=0))

    def test_is_immutable(self):
        q = Question(**question())
        with pytest.raises(ValidationError):
            q.question = "Changed"


class TestExercise:
    def test_create_requires_questions(self):
        with pytest.raises(ValidationError):
            ExerciseCreate(subjectId="s1", title="T", questions=[])

    def test_update_may_omit_questions(self):
        assert ExerciseUpdate(title="New").model_dump(exclude_unset=True) == {"title": "New"}
        with pytest.raises(ValidationError):
            ExerciseUpdate(questions=[])

    def test_nulls_are_backfilled(self):
        exercise = Exercise.model_validate(
            {
                "id": "ex1",
                "subjectId": "s1",
                "title": "T",
                "description": None,
                "questions": [question(id="q1")],
                "createdAt": "2025-01-01T00:00:00Z",
                "nextReviewAt": None,
                "interval": None,
                "repetitions": None,
                "easinessFactor": None,
                "reviewCount": None,
                "successRate": None,
            }
        )
        assert exercise.interval == 1
        assert exercise.repetitions == 0
        assert exercise.easinessFactor == 2.5
        assert exercise.description == ""
        assert exercise.nextReviewAt.endswith("Z")

    def test_easiness_factor_floor(self):
        with pytest.raises(ValidationError):
            Exercise(subjectId="s1", title="T", easinessFactor=1.0)

    def test_find_question(self):
        exercise = Exercise(subjectId="s1", title="T", questions=[question(id="q1")])
        assert exercise.find_question("q1").correctAnswer == 1
        assert exercise.find_question("q2") is None
        assert exercise.question_ids() == {"q1"}


class TestStudyRequests:
    def test_resolved_score(self):
        log = [
            {"questionId": "q1", "isCorrect": True},
            {"questionId": "q2", "isCorrect": False},
        ]
        assert QuizCompletionRequest(answersLog=log).resolved_score() == 1
        assert QuizCompletionRequest(answersLog=log, score=2).resolved_score() == 2

    def test_manual_reschedule_needs_date(self):
        with pytest.raises(ValidationError):
            RescheduleRequest(mode="manual")
        assert RescheduleRequest().mode == "auto"


class TestStudySettings:
    def test_unknown_timezone(self):
        with pytest.raises(ValidationError):
            StudySettings(timezone="Mars/Olympus_Mons")

    def test_tzinfo(self):
        assert StudySettings(timezone="America/Sao_Paulo").tzinfo.key == "America/Sao_Paulo"
