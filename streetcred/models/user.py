"""
User model for GetStreetCred.

Stores account credentials, role and profile picture.
"""

from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from streetcred.core.database import Base


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class User(Base):
    """User model representing registered users."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
        doc="UUID primary key"
    )
    username: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Unique username (normalized email address)"
    )
    password: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        doc="Hashed password (bcrypt)"
    )
    role: Mapped[str] = mapped_column(
        String(10),
        default="user",
        nullable=False,
        doc="Role: user or admin"
    )
    profile_picture_url: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Optional avatar URL"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        doc="Account creation timestamp"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, username={self.username!r}, role={self.role!r})>"
