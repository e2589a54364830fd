"""Exercise review lifecycle.

An exercise starts unreviewed (due immediately) and is rescheduled after every
review; there is no terminal state. Recording a quiz and scheduling the next
review are separate steps:

    outcome = complete_quiz(exercise, score, time_spent, answers_log)
    result = auto_reschedule(outcome.exercise, outcome.session)
    # or: manual_reschedule(outcome.exercise, chosen_date)

All functions are pure. They validate their input before building anything and
return new models; the caller persists the results.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from medstride.errors import AttemptNotFoundError, ExerciseNotFoundError, InvalidInputError
from medstride.models import AnswerLog, Exercise, StudySession
from medstride.srs.quality import map_quality, score_percentage
from medstride.srs.sm2 import ReviewState, next_state
from medstride.srs.time import parse_iso_z, utc_datetime_to_iso_z, utc_now


@dataclass(frozen=True)
class QuizOutcome:
    exercise: Exercise
    session: StudySession


@dataclass(frozen=True)
class ScheduleResult:
    exercise: Exercise
    quality: int | None = None


@dataclass(frozen=True)
class MistakeReviewOutcome:
    exercise: Exercise
    session: StudySession
    quality: int


@dataclass(frozen=True)
class DeletionResult:
    exercise: Exercise
    exercises: list[Exercise]
    sessions: list[StudySession]
    removed_sessions: int


def review_state_of(exercise: Exercise) -> ReviewState:
    """Return the SM-2 state stored on an exercise."""
    return ReviewState(
        interval=exercise.interval,
        repetitions=exercise.repetitions,
        easiness_factor=exercise.easinessFactor,
        next_review_at=parse_iso_z(exercise.nextReviewAt),
    )


def find_exercise(exercises: list[Exercise], exercise_id: str) -> Exercise:
    for exercise in exercises:
        if exercise.id == exercise_id:
            return exercise
    raise ExerciseNotFoundError(f"Exercise with ID {exercise_id} not found")


def replace_exercise(exercises: list[Exercise], updated: Exercise) -> list[Exercise]:
    """Return a copy of `exercises` with the entry sharing `updated.id` swapped out."""
    find_exercise(exercises, updated.id)
    return [updated if ex.id == updated.id else ex for ex in exercises]


def find_session(sessions: list[StudySession], session_id: str) -> StudySession:
    for session in sessions:
        if session.id == session_id:
            return session
    raise AttemptNotFoundError(f"Study session with ID {session_id} not found")


def latest_session_for(sessions: list[StudySession], exercise_id: str) -> StudySession:
    """Return the most recently completed session of an exercise."""
    candidates = [s for s in sessions if s.exerciseId == exercise_id]
    if not candidates:
        raise AttemptNotFoundError(f"No study session recorded for exercise {exercise_id}")
    # max() keeps the first of equal timestamps, so prefer later list entries
    return max(reversed(candidates), key=lambda s: parse_iso_z(s.completedAt))


def replace_session(sessions: list[StudySession], updated: StudySession) -> list[StudySession]:
    find_session(sessions, updated.id)
    return [updated if s.id == updated.id else s for s in sessions]


def _question_count(exercise: Exercise) -> int:
    total = len(exercise.questions)
    if total == 0:
        raise InvalidInputError(f"Exercise {exercise.id} has no questions")
    return total


def _apply_review_state(exercise: Exercise, state: ReviewState, now: datetime, **changes) -> Exercise:
    return exercise.model_copy(
        update={
            "interval": state.interval,
            "repetitions": state.repetitions,
            "easinessFactor": state.easiness_factor,
            "nextReviewAt": utc_datetime_to_iso_z(state.next_review_at),
            "lastReviewedAt": utc_datetime_to_iso_z(now),
            **changes,
        }
    )


def complete_quiz(
    exercise: Exercise,
    score: int,
    time_spent: int,
    answers_log: list[AnswerLog],
    now: datetime | None = None,
) -> QuizOutcome:
    """Record a completed quiz pass.

    Updates:
    - successRate as a running average of per-session percentages
      (folded in before reviewCount is incremented)
    - reviewCount += 1

    nextReviewAt is left alone: the caller follows up with auto_reschedule()
    or manual_reschedule().

    Raises:
        InvalidInputError: If the exercise has no questions or the score is out of range.
    """
    total = _question_count(exercise)
    percentage = score_percentage(score, total)
    if time_spent < 0:
        raise InvalidInputError(f"time_spent must be >= 0, got {time_spent}")
    if now is None:
        now = utc_now()

    session = StudySession(
        exerciseId=exercise.id,
        completedAt=utc_datetime_to_iso_z(now),
        score=score,
        timeSpent=time_spent,
        answersLog=list(answers_log),
    )

    count = exercise.reviewCount
    success_rate = (exercise.successRate * count + percentage) / (count + 1)
    updated = exercise.model_copy(
        update={"successRate": success_rate, "reviewCount": count + 1}
    )
    return QuizOutcome(exercise=updated, session=session)


def auto_reschedule(
    exercise: Exercise, session: StudySession, now: datetime | None = None
) -> ScheduleResult:
    """Schedule the next review from the score of a completed session (SM-2)."""
    if session.exerciseId != exercise.id:
        raise InvalidInputError(
            f"Study session {session.id} belongs to exercise {session.exerciseId}, not {exercise.id}"
        )
    quality = map_quality(session.score, _question_count(exercise))
    if now is None:
        now = utc_now()

    state = next_state(quality, review_state_of(exercise), now)
    return ScheduleResult(exercise=_apply_review_state(exercise, state, now), quality=quality)


def manual_reschedule(
    exercise: Exercise, review_at: datetime, now: datetime | None = None
) -> ScheduleResult:
    """Pin the next review to a chosen date.

    interval, repetitions and easinessFactor are left untouched.
    """
    if not isinstance(review_at, datetime):
        raise InvalidInputError(f"review_at must be a datetime, got {review_at!r}")
    if now is None:
        now = utc_now()

    updated = exercise.model_copy(
        update={
            "nextReviewAt": utc_datetime_to_iso_z(review_at),
            "lastReviewedAt": utc_datetime_to_iso_z(now),
        }
    )
    return ScheduleResult(exercise=updated)


def merge_answers(original: list[AnswerLog], corrections: list[AnswerLog]) -> list[AnswerLog]:
    """Overlay corrected answers onto a session's log by questionId.

    Entries without a correction are kept as they are; corrections for
    questions absent from the log are ignored.
    """
    by_question = {answer.questionId: answer for answer in corrections}
    merged = []
    for answer in original:
        correction = by_question.get(answer.questionId)
        if correction is None:
            merged.append(answer)
        else:
            merged.append(answer.model_copy(update=correction.model_dump(exclude_unset=True)))
    return merged


def complete_mistake_review(
    exercise: Exercise,
    session: StudySession,
    corrections: list[AnswerLog],
    now: datetime | None = None,
) -> MistakeReviewOutcome:
    """Fold a redo of previously missed questions back into a session.

    The corrected log replaces the session's log, successRate is recomputed
    from the corrected answer set (not averaged), and the review counts as a
    full review: reviewCount += 1 and SM-2 runs on the corrected score.
    """
    if session.exerciseId != exercise.id:
        raise InvalidInputError(
            f"Study session {session.id} belongs to exercise {session.exerciseId}, not {exercise.id}"
        )
    total = _question_count(exercise)
    if now is None:
        now = utc_now()

    merged = merge_answers(session.answersLog, corrections)
    question_ids = exercise.question_ids()
    correct = len({a.questionId for a in merged if a.isCorrect and a.questionId in question_ids})

    quality = map_quality(correct, total)
    state = next_state(quality, review_state_of(exercise), now)

    updated_session = session.model_copy(update={"answersLog": merged})
    updated_exercise = _apply_review_state(
        exercise,
        state,
        now,
        successRate=score_percentage(correct, total),
        reviewCount=exercise.reviewCount + 1,
    )
    return MistakeReviewOutcome(exercise=updated_exercise, session=updated_session, quality=quality)


def delete_exercise(
    exercises: list[Exercise], sessions: list[StudySession], exercise_id: str
) -> DeletionResult:
    """Remove an exercise together with the sessions recorded for it."""
    exercise = find_exercise(exercises, exercise_id)
    remaining_sessions = [s for s in sessions if s.exerciseId != exercise_id]
    return DeletionResult(
        exercise=exercise,
        exercises=[ex for ex in exercises if ex.id != exercise_id],
        sessions=remaining_sessions,
        removed_sessions=len(sessions) - len(remaining_sessions),
    )
