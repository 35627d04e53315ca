"""
Pydantic schemas for Project endpoints.

Includes request/response models for project CRUD operations.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator

from .common import CamelModel

Role = Literal["user", "admin"]


# --- Request Schemas ---

class ProjectFields(CamelModel):
    """The user-editable fields of a project."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Project display name"
    )
    location: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="City / country"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="Long-form description"
    )
    image_url: str = Field(
        ...,
        min_length=1,
        description="Hero image URL"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category, e.g. Bridge"
    )
    completion_year: int = Field(
        ...,
        ge=1,
        le=9999,
        description="Year the project was completed"
    )


class ProjectCreate(ProjectFields):
    """Schema for creating a project. Rating fields are not accepted."""

    user_id: Optional[str] = Field(
        default=None,
        description="Creator; becomes the project owner"
    )


class CallerAssertion(CamelModel):
    """Identity asserted in the request body by clients without a token."""

    user_id: Optional[str] = None
    user_role: Optional[Role] = None


class ProjectUpdate(ProjectFields):
    """Full update of the mutable project fields plus the caller's identity."""

    user_id: Optional[str] = None
    user_role: Optional[Role] = None


# --- Response Schemas ---

class ProjectRecord(CamelModel):
    """A project as stored and as returned to clients."""

    id: str
    name: str
    location: str
    description: str
    image_url: str
    category: str
    completion_year: int
    rating: str = "0"
    rating_count: int = 0
    user_id: Optional[str] = None
    is_featured: bool = False
    created_at: Optional[datetime] = None

    @field_validator("is_featured", mode="before")
    @classmethod
    def null_is_not_featured(cls, v):
        return bool(v)

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v):
        return None if v is None else str(v)


class SeedResponse(CamelModel):
    """Result of seeding the sample projects."""

    message: str
    projects: list[ProjectRecord]
