"""
Pydantic schemas for auth and profile endpoints.
"""

from datetime import datetime
from typing import Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator

from .common import CamelModel
from .project import Role


def normalize_username(username: str) -> str:
    """Usernames are emails compared case-insensitively without surrounding whitespace."""
    return username.strip().lower()


class AuthRequest(CamelModel):
    """Request schema for signup and signin."""

    email: str = Field(..., min_length=1, max_length=255, description="Email used as username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return normalize_username(v)


class UserRecord(CamelModel):
    """A user as stored. ``password`` holds the bcrypt hash; never returned to clients."""

    id: str
    username: str
    password: str
    role: Role = "user"
    profile_picture_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v):
        return str(v)

    @field_validator("role", mode="before")
    @classmethod
    def default_role(cls, v):
        return v or "user"


class AuthUserResponse(CamelModel):
    """Public view of a user."""

    id: str
    email: str
    role: Role
    profile_picture_url: Optional[str] = None

    @classmethod
    def from_record(cls, user: UserRecord) -> "AuthUserResponse":
        return cls(
            id=user.id,
            email=user.username,
            role=user.role,
            profile_picture_url=user.profile_picture_url or None,
        )


class AuthSessionResponse(AuthUserResponse):
    """Signup/signin response: the user plus a bearer token."""

    access_token: str

    @classmethod
    def for_user(cls, user: UserRecord, access_token: str) -> "AuthSessionResponse":
        return cls(
            **AuthUserResponse.from_record(user).model_dump(),
            access_token=access_token,
        )


class ProfileUpdate(CamelModel):
    """
    Request schema for PATCH /api/user/profile.

    Empty username/password values are ignored; an empty profilePictureUrl
    clears the picture.
    """

    user_id: Optional[str] = None
    user_role: Optional[Role] = None
    username: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=128)
    profile_picture_url: Optional[str] = None

    @field_validator("profile_picture_url")
    @classmethod
    def validate_picture_url(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return v
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("profilePictureUrl must be an http(s) URL")
        return v
