"""Models module for Pydantic schemas."""

from .exercise import (
    Difficulty,
    Exercise,
    ExerciseBase,
    ExerciseCreate,
    ExerciseUpdate,
    ExerciseResponse,
    ExerciseListResponse,
    Question,
)
from .session import (
    AnswerLog,
    StudySession,
    QuizCompletionRequest,
    RescheduleRequest,
    MistakeReviewRequest,
    StudyResultResponse,
)
from .mistakes import (
    ClearScope,
    ClearScopeKind,
    ClearMistakesResponse,
    MistakeEntry,
    MistakeListResponse,
    MistakeSort,
    SubjectMistakeStat,
)
from .subject import Subject, SubjectListResponse
from .backup import BackupData, BackupMetadata, BackupImportResponse

__all__ = [
    "Difficulty",
    "Exercise",
    "ExerciseBase",
    "ExerciseCreate",
    "ExerciseUpdate",
    "ExerciseResponse",
    "ExerciseListResponse",
    "Question",
    "AnswerLog",
    "StudySession",
    "QuizCompletionRequest",
    "RescheduleRequest",
    "MistakeReviewRequest",
    "StudyResultResponse",
    "ClearScope",
    "ClearScopeKind",
    "ClearMistakesResponse",
    "MistakeEntry",
    "MistakeListResponse",
    "MistakeSort",
    "SubjectMistakeStat",
    "Subject",
    "SubjectListResponse",
    "BackupData",
    "BackupMetadata",
    "BackupImportResponse",
]
