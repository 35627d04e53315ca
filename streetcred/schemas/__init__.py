"""
Pydantic schemas for GetStreetCred API.
"""

from .common import CamelModel, ErrorResponse, SuccessResponse
from .project import (
    CallerAssertion,
    ProjectCreate,
    ProjectFields,
    ProjectRecord,
    ProjectUpdate,
    SeedResponse,
)
from .rating import (
    RatingCreate,
    RatingRecord,
    RatingResult,
    RatingSubmission,
)
from .user import (
    AuthRequest,
    AuthSessionResponse,
    AuthUserResponse,
    ProfileUpdate,
    UserRecord,
    normalize_username,
)

__all__ = [
    # Common
    "CamelModel",
    "ErrorResponse",
    "SuccessResponse",
    # Project schemas
    "CallerAssertion",
    "ProjectCreate",
    "ProjectFields",
    "ProjectRecord",
    "ProjectUpdate",
    "SeedResponse",
    # Rating schemas
    "RatingCreate",
    "RatingRecord",
    "RatingResult",
    "RatingSubmission",
    # User schemas
    "AuthRequest",
    "AuthSessionResponse",
    "AuthUserResponse",
    "ProfileUpdate",
    "UserRecord",
    "normalize_username",
]
