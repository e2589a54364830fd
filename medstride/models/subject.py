"""Subject (discipline) models."""

from pydantic import BaseModel, Field


class Subject(BaseModel):
    """A study subject that exercises are grouped under."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    shortName: str = Field(..., min_length=1, max_length=100)
    color: str = Field("primary", description="Theme color token")
    icon: str = Field("", description="Display icon")


class SubjectListResponse(BaseModel):
    """Response containing the subject catalog."""

    subjects: list[Subject]
    count: int
    custom: bool = Field(..., description="Whether a custom catalog replaced the defaults")
