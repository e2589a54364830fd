"""Exercise models for API requests, responses and persisted records."""

from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from medstride.srs.sm2 import INITIAL_EASINESS_FACTOR, INITIAL_INTERVAL
from medstride.srs.time import DueStatus, utc_now_iso


Difficulty = Literal["easy", "medium", "hard"]


def generate_exercise_id() -> str:
    """Generate a new exercise ID."""
    return f"ex_{uuid4().hex}"


def generate_question_id() -> str:
    """Generate a new question ID."""
    return f"q_{uuid4().hex}"


class Question(BaseModel):
    """A multiple-choice question. Content is immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_question_id, description="Stable identifier across edits")
    question: str = Field(..., min_length=1, description="Question text")
    options: list[str] = Field(..., min_length=2, description="Answer options")
    correctAnswer: int = Field(..., ge=0, description="Index of the correct option")
    explanation: str | None = Field(None, description="Optional explanation shown after answering")

    @model_validator(mode="after")
    def _correct_answer_in_range(self) -> "Question":
        if self.correctAnswer >= len(self.options):
            raise ValueError(
                f"correctAnswer {self.correctAnswer} is out of range for {len(self.options)} options"
            )
        return self


class ExerciseBase(BaseModel):
    """Base exercise model with common fields."""

    subjectId: str = Field(..., min_length=1, description="Owning subject ID")
    title: str = Field(..., min_length=1, max_length=200, description="Exercise title")
    description: str = Field("", max_length=2000, description="Free-text description")
    difficulty: Difficulty = Field("medium", description="Self-assessed difficulty")
    isSimulado: bool = Field(False, description="Whether this is a mock exam")
    questions: list[Question] = Field(default_factory=list, description="Questions in quiz order")


class ExerciseCreate(ExerciseBase):
    """Model for creating a new exercise."""

    @field_validator("questions")
    @classmethod
    def _questions_required(cls, value: list[Question]) -> list[Question]:
        if not value:
            raise ValueError("an exercise needs at least one question")
        return value


class ExerciseUpdate(BaseModel):
    """Model for updating exercise content. Scheduling fields are not editable here."""

    subjectId: str | None = Field(None, min_length=1)
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    difficulty: Difficulty | None = None
    isSimulado: bool | None = None
    questions: list[Question] | None = None

    @field_validator("questions")
    @classmethod
    def _questions_not_emptied(cls, value: list[Question] | None) -> list[Question] | None:
        if value is not None and not value:
            raise ValueError("an exercise needs at least one question")
        return value


# Fields back-filled when an older record lacks them or stores null
_SCHEDULING_DEFAULTS: dict[str, Any] = {
    "reviewCount": 0,
    "successRate": 0.0,
    "interval": INITIAL_INTERVAL,
    "repetitions": 0,
    "easinessFactor": INITIAL_EASINESS_FACTOR,
}


class Exercise(ExerciseBase):
    """Full exercise model as persisted in the store."""

    id: str = Field(default_factory=generate_exercise_id, description="Unique identifier")
    createdAt: str = Field(default_factory=utc_now_iso, description="Creation timestamp")
    lastReviewedAt: str | None = Field(None, description="Last review timestamp (UTC ISO Z)")
    nextReviewAt: str = Field(default_factory=utc_now_iso, description="Next review timestamp (UTC ISO Z)")
    reviewCount: int = Field(0, ge=0, description="Completed reviews")
    successRate: float = Field(0.0, ge=0, le=100, description="Average score percentage")

    # SM-2 state (persisted)
    interval: int = Field(INITIAL_INTERVAL, ge=1, description="Days until the next review")
    repetitions: int = Field(0, ge=0, description="Consecutive successful reviews")
    easinessFactor: float = Field(INITIAL_EASINESS_FACTOR, ge=1.3, description="SM-2 easiness factor (min 1.3)")

    @model_validator(mode="before")
    @classmethod
    def _backfill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key, default in _SCHEDULING_DEFAULTS.items():
            if data.get(key) is None:
                data[key] = default
        if not data.get("nextReviewAt"):
            data.pop("nextReviewAt", None)
        if not data.get("createdAt"):
            data.pop("createdAt", None)
        if data.get("description") is None:
            data["description"] = ""
        return data

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "id": "ex_1f0c6d1e2b7a4c0c9d4e5f6a7b8c9d0e",
                "subjectId": "fisiologia-renal",
                "title": "Glomerular filtration",
                "description": "Week 3 problem set",
                "difficulty": "medium",
                "isSimulado": False,
                "questions": [
                    {
                        "id": "q1",
                        "question": "Where does most sodium reabsorption happen?",
                        "options": ["Proximal tubule", "Loop of Henle", "Collecting duct"],
                        "correctAnswer": 0,
                    }
                ],
                "createdAt": "2025-01-01T00:00:00Z",
                "lastReviewedAt": None,
                "nextReviewAt": "2025-01-01T00:00:00Z",
                "reviewCount": 0,
                "successRate": 0,
                "interval": 1,
                "repetitions": 0,
                "easinessFactor": 2.5,
            }
        }

    def question_ids(self) -> set[str]:
        return {q.id for q in self.questions}

    def find_question(self, question_id: str) -> Question | None:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None


class ExerciseResponse(Exercise):
    """Exercise returned by the API, with its due status for today."""

    dueStatus: DueStatus


class ExerciseListResponse(BaseModel):
    """Response containing a list of exercises."""

    exercises: list[ExerciseResponse]
    count: int
