"""API routers module."""

from .exercises import router as exercises_router
from .study import router as study_router
from .mistakes import router as mistakes_router
from .subjects import router as subjects_router
from .backup import router as backup_router

__all__ = [
    "exercises_router",
    "study_router",
    "mistakes_router",
    "subjects_router",
    "backup_router",
]
