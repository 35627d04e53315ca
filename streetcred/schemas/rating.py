"""
Pydantic schemas for Rating endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .common import CamelModel
from .project import ProjectRecord


class RatingCreate(CamelModel):
    """Request body for POST /api/ratings."""

    project_id: str = Field(..., min_length=1, description="Rated project")
    user_id: Optional[str] = Field(
        default=None,
        description="Rating author; taken from the bearer token when one is sent"
    )
    rating: int = Field(..., ge=1, le=5, description="Score between 1 and 5")
    review: Optional[str] = Field(default=None, max_length=5000)


class RatingSubmission(CamelModel):
    """A fully resolved rating handed to the storage backend."""

    project_id: str
    user_id: str
    rating: int = Field(..., ge=1, le=5)
    review: Optional[str] = None

    @field_validator("review")
    @classmethod
    def blank_review_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class RatingRecord(CamelModel):
    """A rating as stored and as returned to clients."""

    id: str
    project_id: str
    user_id: str
    rating: int
    review: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("id", "project_id", "user_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v):
        return str(v)


class RatingResult(CamelModel):
    """Response for a submitted rating: the rating and the re-aggregated project."""

    rating: RatingRecord
    updated_project: Optional[ProjectRecord] = None
