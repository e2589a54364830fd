"""Study session (quiz attempt) models."""

from __future__ import annotations

from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from medstride.models.exercise import ExerciseResponse
from medstride.srs.time import utc_now_iso


def generate_session_id() -> str:
    """Generate a new study session ID."""
    return f"session_{uuid4().hex}"


class AnswerLog(BaseModel):
    """One answered question within a study session."""

    questionId: str = Field(..., min_length=1)
    selectedAnswer: int | None = Field(None, ge=0, description="Chosen option index, None if skipped")
    isCorrect: bool
    timeSpent: int = Field(0, ge=0, description="Milliseconds spent on the question")


class StudySession(BaseModel):
    """A completed quiz pass over an exercise."""

    id: str = Field(default_factory=generate_session_id)
    exerciseId: str = Field(..., min_length=1)
    completedAt: str = Field(default_factory=utc_now_iso)
    score: int = Field(0, ge=0, description="Number of correct answers")
    timeSpent: int = Field(0, ge=0, description="Total milliseconds spent")
    answersLog: list[AnswerLog] = Field(default_factory=list)


class QuizCompletionRequest(BaseModel):
    """Request body for recording a completed quiz."""

    score: int | None = Field(
        None, ge=0, description="Correct answers; derived from answersLog when omitted"
    )
    timeSpent: int = Field(0, ge=0)
    answersLog: list[AnswerLog] = Field(..., min_length=1)

    def resolved_score(self) -> int:
        if self.score is not None:
            return self.score
        return sum(1 for answer in self.answersLog if answer.isCorrect)


class RescheduleRequest(BaseModel):
    """Request body for scheduling the next review after a quiz."""

    mode: Literal["auto", "manual"] = "auto"
    reviewAt: str | None = Field(None, description="Explicit review date for manual mode (ISO 8601)")
    sessionId: str | None = Field(None, description="Session to grade in auto mode; latest when omitted")

    @model_validator(mode="after")
    def _manual_needs_date(self) -> "RescheduleRequest":
        if self.mode == "manual" and not self.reviewAt:
            raise ValueError("reviewAt is required for manual rescheduling")
        return self


class MistakeReviewRequest(BaseModel):
    """Corrected answers for previously missed questions."""

    answersLog: list[AnswerLog] = Field(..., min_length=1)
    sessionId: str | None = Field(None, description="Session being corrected; latest when omitted")


class StudyResultResponse(BaseModel):
    """Exercise and session state after a study operation."""

    exercise: ExerciseResponse
    session: StudySession | None = None
    quality: int | None = Field(None, ge=0, le=5)
