"""Study settings loaded from environment variables."""

import os
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, field_validator


DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173"


class StudySettings(BaseModel):
    """Settings for scheduling and the HTTP service."""

    timezone: str = "UTC"  # IANA name used for whole-day due comparisons
    cors_origins: list[str] = []

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@lru_cache()
def get_study_settings() -> StudySettings:
    """Get cached study settings from environment variables."""
    origins = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return StudySettings(
        timezone=os.getenv("STUDY_TIMEZONE", "UTC") or "UTC",
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
    )
