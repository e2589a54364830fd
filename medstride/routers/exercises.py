"""Exercises API router."""

import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, status

from medstride.config import get_study_settings
from medstride.errors import ExerciseNotFoundError
from medstride.models import (
    Exercise,
    ExerciseCreate,
    ExerciseListResponse,
    ExerciseResponse,
    ExerciseUpdate,
)
from medstride.repositories import get_exercise_repository, get_session_repository
from medstride.srs.lifecycle import delete_exercise as remove_exercise, replace_exercise
from medstride.srs.time import classify_due, parse_iso_z, utc_datetime_to_iso_z, utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/exercises", tags=["exercises"])


def to_response(exercise: Exercise, now: datetime) -> ExerciseResponse:
    """Attach today's due status to an exercise."""
    due_status = classify_due(
        parse_iso_z(exercise.nextReviewAt), now, get_study_settings().tzinfo
    )
    return ExerciseResponse(**exercise.model_dump(), dueStatus=due_status)


def _not_found(exercise_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Exercise with ID {exercise_id} not found",
    )


@router.get("", response_model=ExerciseListResponse)
async def list_exercises(subjectId: str | None = None) -> ExerciseListResponse:
    """List exercises, optionally limited to one subject."""
    exercises = get_exercise_repository().list_all()
    if subjectId:
        exercises = [ex for ex in exercises if ex.subjectId == subjectId]

    now = utc_now()
    return ExerciseListResponse(
        exercises=[to_response(ex, now) for ex in exercises],
        count=len(exercises),
    )


@router.get("/due", response_model=ExerciseListResponse)
async def list_due_exercises() -> ExerciseListResponse:
    """List exercises due today or overdue, earliest first."""
    now = utc_now()
    responses = [to_response(ex, now) for ex in get_exercise_repository().list_all()]
    due = [r for r in responses if r.dueStatus != "upcoming"]
    due.sort(key=lambda r: parse_iso_z(r.nextReviewAt))
    return ExerciseListResponse(exercises=due, count=len(due))


@router.get("/{exercise_id}", response_model=ExerciseResponse)
async def get_exercise(exercise_id: str) -> ExerciseResponse:
    """Get a specific exercise by ID."""
    try:
        exercise = get_exercise_repository().get_by_id(exercise_id)
    except ExerciseNotFoundError:
        raise _not_found(exercise_id)
    return to_response(exercise, utc_now())


@router.post("", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
async def create_exercise(exercise_create: ExerciseCreate) -> ExerciseResponse:
    """Create a new exercise, due for its first review right away."""
    now = utc_now()
    now_iso = utc_datetime_to_iso_z(now)
    exercise = Exercise(
        **exercise_create.model_dump(),
        createdAt=now_iso,
        nextReviewAt=now_iso,
    )
    get_exercise_repository().add(exercise)
    logger.info(f"Exercise created: id={exercise.id}, subject={exercise.subjectId}")
    return to_response(exercise, now)


@router.put("/{exercise_id}", response_model=ExerciseResponse)
async def update_exercise(exercise_id: str, exercise_update: ExerciseUpdate) -> ExerciseResponse:
    """Edit exercise content. Question IDs stay stable so history still resolves."""
    repo = get_exercise_repository()
    exercises = repo.list_all()
    try:
        existing = next(ex for ex in exercises if ex.id == exercise_id)
    except StopIteration:
        raise _not_found(exercise_id)

    update_data = exercise_update.model_dump(exclude_unset=True)
    if not update_data:
        return to_response(existing, utc_now())

    # Re-validate so nested questions come back as models
    updated = Exercise.model_validate({**existing.model_dump(), **update_data})
    repo.save_all(replace_exercise(exercises, updated))
    return to_response(updated, utc_now())


@router.delete("/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exercise(exercise_id: str) -> None:
    """Delete an exercise along with its study sessions and answer snapshot."""
    exercise_repo = get_exercise_repository()
    session_repo = get_session_repository()

    try:
        result = remove_exercise(exercise_repo.list_all(), session_repo.list_all(), exercise_id)
    except ExerciseNotFoundError:
        raise _not_found(exercise_id)

    exercise_repo.save_all(result.exercises)
    session_repo.save_all(result.sessions)
    session_repo.delete_answers(exercise_id)
    logger.info(
        f"Exercise deleted: id={exercise_id}, sessions_removed={result.removed_sessions}"
    )
