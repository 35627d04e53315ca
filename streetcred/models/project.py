"""
Project model for GetStreetCred.

An infrastructure landmark that users browse and rate. ``rating`` and
``rating_count`` are derived from the ratings table and are only written
by the rating submission path.
"""

from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from streetcred.core.database import Base


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class Project(Base):
    """
    Project model representing a rated infrastructure project.

    At most one row may have is_featured set; the partial unique index
    below enforces that on both SQLite and PostgreSQL.
    """

    __tablename__ = "projects"
    __table_args__ = (
        Index(
            "uq_projects_single_featured",
            "is_featured",
            unique=True,
            sqlite_where=text("is_featured = 1"),
            postgresql_where=text("is_featured"),
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
        doc="UUID primary key"
    )
    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        doc="Project display name"
    )
    location: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        doc="City / country"
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="Long-form description"
    )
    image_url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="Hero image URL"
    )
    category: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
        doc="Category, e.g. Bridge, Skyscraper, Airport"
    )
    completion_year: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Year the project was completed"
    )

    # Aggregates maintained by rating submission
    rating: Mapped[str] = mapped_column(
        String(10),
        default="0",
        nullable=False,
        doc="Mean rating formatted with one decimal, '0' when unrated"
    )
    rating_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        doc="Number of ratings"
    )

    user_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        doc="Owner (creator) of the project"
    )
    is_featured: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        doc="Whether this is the featured project on the landing view"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        doc="Creation timestamp"
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id!r}, name={self.name!r}, rating={self.rating!r})>"
