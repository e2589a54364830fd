"""Models for the mistake ledger."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator


ClearScopeKind = Literal["all", "subject", "question"]
MistakeSort = Literal["mistakeCount", "subject"]


class MistakeEntry(BaseModel):
    """How many times one question was answered wrong across all sessions."""

    questionId: str
    questionText: str
    exerciseId: str
    exerciseTitle: str
    subjectId: str
    subjectName: str | None = None
    mistakeCount: int = Field(..., ge=1)


class SubjectMistakeStat(BaseModel):
    """Mistake total for one subject."""

    subjectId: str
    subjectName: str | None = None
    count: int


class ClearScope(BaseModel):
    """Which part of the mistake history to clear.

    kind "all" takes no target; "subject" targets a subject ID and
    "question" a question ID.
    """

    kind: ClearScopeKind
    targetId: str | None = None

    @model_validator(mode="after")
    def _target_matches_kind(self) -> "ClearScope":
        if self.kind == "all" and self.targetId is not None:
            raise ValueError("scope 'all' does not take a targetId")
        if self.kind != "all" and not self.targetId:
            raise ValueError(f"scope '{self.kind}' requires a targetId")
        return self

    @classmethod
    def everything(cls) -> "ClearScope":
        return cls(kind="all")

    @classmethod
    def by_subject(cls, subject_id: str) -> "ClearScope":
        return cls(kind="subject", targetId=subject_id)

    @classmethod
    def by_question(cls, question_id: str) -> "ClearScope":
        return cls(kind="question", targetId=question_id)


class MistakeListResponse(BaseModel):
    """Response for GET /mistakes."""

    mistakes: list[MistakeEntry]
    totalMistakes: int
    uniqueMistakes: int
    bySubject: list[SubjectMistakeStat]


class ClearMistakesResponse(BaseModel):
    """Response for DELETE /mistakes."""

    scope: ClearScope
    sessionsRemaining: int
    sessionsRemoved: int
