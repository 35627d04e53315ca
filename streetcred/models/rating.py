"""
Rating model for GetStreetCred.

A single 1-5 score with optional review. Rows are immutable once written.
"""

from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from streetcred.core.database import Base


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class Rating(Base):
    """Rating model. A user may rate the same project more than once."""

    __tablename__ = "ratings"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_ratings_rating_range"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
        doc="UUID primary key"
    )
    project_id: Mapped[str] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Rated project"
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Rating author"
    )
    rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Score between 1 and 5"
    )
    review: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Optional free-text review"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        doc="Submission timestamp"
    )

    def __repr__(self) -> str:
        return f"<Rating(id={self.id!r}, project_id={self.project_id!r}, rating={self.rating!r})>"
