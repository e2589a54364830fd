"""Backup API router (full export and restore of the study data)."""

import logging

from fastapi import APIRouter

from medstride.models import AnswerLog, BackupData, BackupImportResponse
from medstride.repositories import (
    answers_key,
    get_exercise_repository,
    get_session_repository,
    get_store,
)
from medstride.repositories.session_repository import ANSWERS_KEY_PREFIX

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/backup", tags=["backup"])

PREFERENCES_KEY = "user-preferences"


@router.get("", response_model=BackupData)
async def export_backup() -> BackupData:
    """Bundle exercises, sessions, answer snapshots and preferences."""
    exercises = get_exercise_repository().list_all()
    session_repo = get_session_repository()

    quiz_answers: dict[str, list[AnswerLog]] = {}
    for exercise in exercises:
        answers = session_repo.get_answers(exercise.id)
        if answers is not None:
            quiz_answers[answers_key(exercise.id)] = answers

    preferences = get_store().get(PREFERENCES_KEY)
    return BackupData.build(
        exercises,
        session_repo.list_all(),
        quiz_answers,
        preferences if isinstance(preferences, dict) else None,
    )


@router.post("", response_model=BackupImportResponse)
async def import_backup(backup: BackupData) -> BackupImportResponse:
    """Replace the stored exercises and sessions with a backup's contents."""
    session_repo = get_session_repository()

    restored = 0
    for key, answers in backup.quizAnswers.items():
        if not key.startswith(ANSWERS_KEY_PREFIX):
            logger.warning("Skipping unexpected answer snapshot key in backup: %s", key)
            continue
        session_repo.save_answers(key[len(ANSWERS_KEY_PREFIX):], answers)
        restored += 1

    if backup.userPreferences:
        get_store().set(PREFERENCES_KEY, backup.userPreferences)

    # A restore replaces the collections outright, unreadable records included
    get_exercise_repository().save_all(backup.exercises, keep_unreadable=False)
    session_repo.save_all(backup.studySessions, keep_unreadable=False)

    logger.info(
        f"Backup imported: version={backup.metadata.version}, "
        f"exercises={len(backup.exercises)}, sessions={len(backup.studySessions)}"
    )
    return BackupImportResponse(
        exercises=len(backup.exercises),
        studySessions=len(backup.studySessions),
        quizAnswers=restored,
        version=backup.metadata.version,
    )
