"""Backup bundle models (full export/import of the study data)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from medstride.models.exercise import Exercise
from medstride.models.session import AnswerLog, StudySession
from medstride.srs.time import utc_now_iso


BACKUP_FORMAT_VERSION = "1.1.0"
APP_VERSION = "1.0.0"


class BackupMetadata(BaseModel):
    """Descriptive information stored alongside a backup."""

    createdAt: str = Field(default_factory=utc_now_iso)
    version: str = BACKUP_FORMAT_VERSION
    totalQuestions: int = Field(0, ge=0)
    totalSubjects: int = Field(0, ge=0)
    appVersion: str | None = APP_VERSION


class BackupData(BaseModel):
    """Everything needed to restore the study data on another device.

    quizAnswers maps answer-snapshot keys (quiz-answers-<exerciseId>) to the
    answer log of the latest session of that exercise.
    """

    exercises: list[Exercise]
    studySessions: list[StudySession]
    quizAnswers: dict[str, list[AnswerLog]] = Field(default_factory=dict)
    userPreferences: dict[str, Any] = Field(default_factory=dict)
    metadata: BackupMetadata = Field(default_factory=BackupMetadata)

    @classmethod
    def build(
        cls,
        exercises: list[Exercise],
        sessions: list[StudySession],
        quiz_answers: dict[str, list[AnswerLog]],
        user_preferences: dict[str, Any] | None = None,
        created_at: str | None = None,
    ) -> "BackupData":
        """Assemble a backup and compute its metadata."""
        metadata = BackupMetadata(
            totalQuestions=sum(len(ex.questions) for ex in exercises),
            totalSubjects=len({ex.subjectId for ex in exercises}),
        )
        if created_at is not None:
            metadata.createdAt = created_at
        return cls(
            exercises=exercises,
            studySessions=sessions,
            quizAnswers=quiz_answers,
            userPreferences=user_preferences or {},
            metadata=metadata,
        )


class BackupImportResponse(BaseModel):
    """Summary of a restored backup."""

    exercises: int
    studySessions: int
    quizAnswers: int
    version: str
