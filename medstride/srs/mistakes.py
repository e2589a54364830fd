"""Mistake ledger derived from the study session history.

The ledger is never stored: it is recomputed from the sessions each time.
Sessions whose exercise was deleted, and answers whose question was removed
by an edit, are skipped.
"""

from __future__ import annotations

from medstride.errors import InvalidInputError
from medstride.models import (
    ClearScope,
    Exercise,
    MistakeEntry,
    MistakeSort,
    StudySession,
    Subject,
    SubjectMistakeStat,
)


def aggregate_mistakes(
    exercises: list[Exercise],
    sessions: list[StudySession],
    subjects: list[Subject] | None = None,
) -> list[MistakeEntry]:
    """Count wrong answers per question across all sessions.

    Entries are returned in the order their question was first seen;
    ordering for display is left to sort_mistakes().
    """
    exercises_by_id = {ex.id: ex for ex in exercises}
    subject_names = {s.id: s.name for s in subjects or []}
    counts: dict[str, int] = {}
    owners: dict[str, tuple[Exercise, str]] = {}

    for session in sessions:
        exercise = exercises_by_id.get(session.exerciseId)
        if exercise is None:
            continue

        for answer in session.answersLog:
            if answer.isCorrect:
                continue
            question = exercise.find_question(answer.questionId)
            if question is None:
                continue

            if question.id not in counts:
                counts[question.id] = 0
                owners[question.id] = (exercise, question.question)
            counts[question.id] += 1

    entries = []
    for question_id, count in counts.items():
        exercise, text = owners[question_id]
        entries.append(
            MistakeEntry(
                questionId=question_id,
                questionText=text,
                exerciseId=exercise.id,
                exerciseTitle=exercise.title,
                subjectId=exercise.subjectId,
                subjectName=subject_names.get(exercise.subjectId),
                mistakeCount=count,
            )
        )
    return entries


def _drop_empty(sessions: list[StudySession]) -> list[StudySession]:
    return [s for s in sessions if s.answersLog]


def clear_mistakes(
    sessions: list[StudySession],
    scope: ClearScope,
    exercises: list[Exercise] | None = None,
) -> list[StudySession]:
    """Permanently remove mistake records from the session history.

    - all: every session is dropped
    - subject: sessions of that subject's exercises keep only their correct answers
    - question: wrong answers to that question are removed, correct ones kept

    Sessions left without answers are dropped. `exercises` is needed to
    resolve subjects for the "subject" scope.

    Raises:
        InvalidInputError: If the scope is not recognised or lacks its target,
            or if the subject scope is used without `exercises`.
    """
    kind = getattr(scope, "kind", None)

    if kind == "all":
        return []

    if kind == "subject":
        if not scope.targetId:
            raise InvalidInputError("subject scope requires a targetId")
        if exercises is None:
            raise InvalidInputError("subject scope requires the exercises to resolve subjects")
        subject_exercises = {ex.id for ex in exercises if ex.subjectId == scope.targetId}
        cleared = []
        for session in sessions:
            if session.exerciseId in subject_exercises:
                session = session.model_copy(
                    update={"answersLog": [a for a in session.answersLog if a.isCorrect]}
                )
            cleared.append(session)
        return _drop_empty(cleared)

    if kind == "question":
        if not scope.targetId:
            raise InvalidInputError("question scope requires a targetId")
        cleared = []
        for session in sessions:
            kept = [
                a for a in session.answersLog
                if a.isCorrect or a.questionId != scope.targetId
            ]
            if len(kept) != len(session.answersLog):
                session = session.model_copy(update={"answersLog": kept})
            cleared.append(session)
        return _drop_empty(cleared)

    raise InvalidInputError(f"Unknown clear scope: {kind!r}")


def filter_by_subject(entries: list[MistakeEntry], subject_id: str | None) -> list[MistakeEntry]:
    if not subject_id or subject_id == "all":
        return list(entries)
    return [e for e in entries if e.subjectId == subject_id]


def sort_mistakes(entries: list[MistakeEntry], sort_by: MistakeSort = "mistakeCount") -> list[MistakeEntry]:
    """Order entries for display: most frequent first, or by subject name."""
    if sort_by == "mistakeCount":
        return sorted(entries, key=lambda e: -e.mistakeCount)
    if sort_by == "subject":
        return sorted(entries, key=lambda e: (e.subjectName or e.subjectId).casefold())
    raise InvalidInputError(f"Unknown sort order: {sort_by!r}")


def summarize_by_subject(entries: list[MistakeEntry]) -> list[SubjectMistakeStat]:
    """Total mistakes per subject, in first-seen order."""
    stats: dict[str, SubjectMistakeStat] = {}
    for entry in entries:
        stat = stats.get(entry.subjectId)
        if stat is None:
            stats[entry.subjectId] = SubjectMistakeStat(
                subjectId=entry.subjectId,
                subjectName=entry.subjectName,
                count=entry.mistakeCount,
            )
        else:
            stat.count += entry.mistakeCount
    return list(stats.values())
