"""
SQLAlchemy models for GetStreetCred.

This module exports all database models for convenient importing:

    from streetcred.models import User, Project, Rating

All models use UUID strings as primary keys for SQLite compatibility.
"""

from .user import User
from .project import Project
from .rating import Rating

__all__ = [
    "User",
    "Project",
    "Rating",
]
