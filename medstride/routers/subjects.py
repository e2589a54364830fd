"""Subjects API router."""

from fastapi import APIRouter, HTTPException, status

from medstride.models import Subject, SubjectListResponse
from medstride.repositories import get_subject_repository

router = APIRouter(prefix="/subjects", tags=["subjects"])


@router.get("", response_model=SubjectListResponse)
async def list_subjects() -> SubjectListResponse:
    """List the subject catalog (custom if saved, defaults otherwise)."""
    repo = get_subject_repository()
    custom = repo.load_custom()
    subjects = custom if custom is not None else repo.list_all()
    return SubjectListResponse(subjects=subjects, count=len(subjects), custom=custom is not None)


@router.put("", response_model=SubjectListResponse)
async def replace_subjects(subjects: list[Subject]) -> SubjectListResponse:
    """Save a custom subject catalog, replacing the defaults."""
    ids = [s.id for s in subjects]
    if len(ids) != len(set(ids)):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Subject IDs must be unique",
        )
    get_subject_repository().save_all(subjects)
    return SubjectListResponse(subjects=subjects, count=len(subjects), custom=True)


@router.delete("", response_model=SubjectListResponse)
async def reset_subjects() -> SubjectListResponse:
    """Discard the custom catalog and return to the defaults."""
    repo = get_subject_repository()
    repo.reset()
    subjects = repo.list_all()
    return SubjectListResponse(subjects=subjects, count=len(subjects), custom=False)
