"""Mistakes API router."""

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import ValidationError

from medstride.errors import InvalidInputError
from medstride.models import (
    ClearMistakesResponse,
    ClearScope,
    MistakeListResponse,
    MistakeSort,
)
from medstride.repositories import (
    get_exercise_repository,
    get_session_repository,
    get_subject_repository,
)
from medstride.srs.mistakes import (
    aggregate_mistakes,
    clear_mistakes,
    filter_by_subject,
    sort_mistakes,
    summarize_by_subject,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mistakes", tags=["mistakes"])


@router.get("", response_model=MistakeListResponse)
async def list_mistakes(
    subjectId: str | None = None, sortBy: MistakeSort = "mistakeCount"
) -> MistakeListResponse:
    """Mistake ledger across all study sessions.

    Totals and per-subject stats cover every subject; subjectId only filters
    the returned entries.
    """
    entries = aggregate_mistakes(
        get_exercise_repository().list_all(),
        get_session_repository().list_all(),
        get_subject_repository().list_all(),
    )
    shown = sort_mistakes(filter_by_subject(entries, subjectId), sortBy)
    return MistakeListResponse(
        mistakes=shown,
        totalMistakes=sum(e.mistakeCount for e in entries),
        uniqueMistakes=len(entries),
        bySubject=summarize_by_subject(entries),
    )


@router.delete("", response_model=ClearMistakesResponse)
async def delete_mistakes(scope: str, targetId: str | None = None) -> ClearMistakesResponse:
    """Permanently clear mistake records: all, by subject, or by question."""
    try:
        clear_scope = ClearScope.model_validate({"kind": scope, "targetId": targetId})
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid clear scope: {e.errors()[0]['msg']}",
        )

    session_repo = get_session_repository()
    sessions = session_repo.list_all()
    try:
        remaining = clear_mistakes(sessions, clear_scope, get_exercise_repository().list_all())
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    session_repo.save_all(remaining)
    logger.info(
        f"Mistakes cleared: scope={clear_scope.kind}, target={clear_scope.targetId}, "
        f"sessions_removed={len(sessions) - len(remaining)}"
    )
    return ClearMistakesResponse(
        scope=clear_scope,
        sessionsRemaining=len(remaining),
        sessionsRemoved=len(sessions) - len(remaining),
    )
