"""Study (review) API router.

Completing a quiz and scheduling the next review are two requests:
POST /study/{id}/complete records the session, then
POST /study/{id}/reschedule picks the next review date (SM-2 or manual).
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, status

from medstride.config import get_study_settings
from medstride.errors import AttemptNotFoundError, ExerciseNotFoundError, InvalidInputError
from medstride.models import (
    MistakeReviewRequest,
    QuizCompletionRequest,
    RescheduleRequest,
    StudyResultResponse,
)
from medstride.repositories import get_exercise_repository, get_session_repository
from medstride.routers.exercises import to_response
from medstride.srs.lifecycle import (
    auto_reschedule,
    complete_mistake_review,
    complete_quiz,
    find_exercise,
    find_session,
    latest_session_for,
    manual_reschedule,
    replace_exercise,
    replace_session,
)
from medstride.srs.time import parse_review_date, utc_now

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/study", tags=["study"])


def _study_now() -> datetime:
    """Current time in the study timezone.

    Review dates are computed from this, so adding days follows the local
    calendar across DST changes.
    """
    return utc_now().astimezone(get_study_settings().tzinfo)


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (ExerciseNotFoundError, AttemptNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post("/{exercise_id}/complete", response_model=StudyResultResponse)
async def complete_exercise_quiz(exercise_id: str, request: QuizCompletionRequest) -> StudyResultResponse:
    """Record a finished quiz. The next review date is not changed here."""
    exercise_repo = get_exercise_repository()
    session_repo = get_session_repository()
    now = _study_now()

    exercises = exercise_repo.list_all()
    try:
        exercise = find_exercise(exercises, exercise_id)
        outcome = complete_quiz(
            exercise,
            score=request.resolved_score(),
            time_spent=request.timeSpent,
            answers_log=request.answersLog,
            now=now,
        )
    except (ExerciseNotFoundError, InvalidInputError) as e:
        raise _http_error(e)

    sessions = session_repo.list_all()
    sessions.append(outcome.session)
    session_repo.save_all(sessions)
    session_repo.save_answers(exercise_id, outcome.session.answersLog)
    exercise_repo.save_all(replace_exercise(exercises, outcome.exercise))

    logger.info(
        f"Quiz completed: exercise={exercise_id}, session={outcome.session.id}, "
        f"score={outcome.session.score}/{len(exercise.questions)}, "
        f"success_rate={outcome.exercise.successRate:.1f}"
    )
    return StudyResultResponse(exercise=to_response(outcome.exercise, now), session=outcome.session)


@router.post("/{exercise_id}/reschedule", response_model=StudyResultResponse)
async def reschedule_exercise(exercise_id: str, request: RescheduleRequest) -> StudyResultResponse:
    """Schedule the next review automatically (SM-2) or on a chosen date."""
    exercise_repo = get_exercise_repository()
    now = _study_now()

    exercises = exercise_repo.list_all()
    session = None
    try:
        exercise = find_exercise(exercises, exercise_id)
        if request.mode == "manual":
            try:
                review_at = parse_review_date(request.reviewAt, get_study_settings().tzinfo)
            except ValueError:
                raise InvalidInputError(f"Invalid reviewAt date: {request.reviewAt}")
            result = manual_reschedule(exercise, review_at, now=now)
        else:
            sessions = get_session_repository().list_all()
            if request.sessionId:
                session = find_session(sessions, request.sessionId)
            else:
                session = latest_session_for(sessions, exercise_id)
            result = auto_reschedule(exercise, session, now=now)
    except (ExerciseNotFoundError, AttemptNotFoundError, InvalidInputError) as e:
        raise _http_error(e)

    exercise_repo.save_all(replace_exercise(exercises, result.exercise))

    logger.info(
        f"Review scheduled: exercise={exercise_id}, mode={request.mode}, "
        f"quality={result.quality}, next_review_at={result.exercise.nextReviewAt}"
    )
    return StudyResultResponse(
        exercise=to_response(result.exercise, now),
        session=session,
        quality=result.quality,
    )


@router.post("/{exercise_id}/review-mistakes", response_model=StudyResultResponse)
async def review_exercise_mistakes(exercise_id: str, request: MistakeReviewRequest) -> StudyResultResponse:
    """Merge a redo of missed questions into a session and reschedule from it."""
    exercise_repo = get_exercise_repository()
    session_repo = get_session_repository()
    now = _study_now()

    exercises = exercise_repo.list_all()
    sessions = session_repo.list_all()
    try:
        exercise = find_exercise(exercises, exercise_id)
        if request.sessionId:
            session = find_session(sessions, request.sessionId)
        else:
            session = latest_session_for(sessions, exercise_id)
        outcome = complete_mistake_review(exercise, session, request.answersLog, now=now)
    except (ExerciseNotFoundError, AttemptNotFoundError, InvalidInputError) as e:
        raise _http_error(e)

    session_repo.save_all(replace_session(sessions, outcome.session))
    session_repo.save_answers(exercise_id, outcome.session.answersLog)
    exercise_repo.save_all(replace_exercise(exercises, outcome.exercise))

    logger.info(
        f"Mistake review completed: exercise={exercise_id}, session={session.id}, "
        f"quality={outcome.quality}, next_review_at={outcome.exercise.nextReviewAt}"
    )
    return StudyResultResponse(
        exercise=to_response(outcome.exercise, now),
        session=outcome.session,
        quality=outcome.quality,
    )
