"""
Storage backend contract.

Every persistence variant (SQL tables via SQLAlchemy, PostgREST over HTTP)
implements StorageBackend. Routes only ever talk to this interface, so
both variants share the same semantics: usernames are normalized before
lookup, new projects start unrated, and rating submission recomputes the
project aggregate atomically.
"""

from abc import ABC, abstractmethod
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from streetcred.schemas.project import ProjectFields, ProjectRecord
from streetcred.schemas.rating import RatingRecord, RatingSubmission
from streetcred.schemas.user import UserRecord

# Fields a project create/update may write. rating, rating_count and
# is_featured have their own write paths.
MUTABLE_PROJECT_FIELDS: frozenset[str] = frozenset({
    "name",
    "location",
    "description",
    "image_url",
    "category",
    "completion_year",
})

# Fields a profile update may write.
MUTABLE_USER_FIELDS: frozenset[str] = frozenset({
    "username",
    "password",
    "profile_picture_url",
})

VALID_ROLES: frozenset[str] = frozenset({"user", "admin"})

UNRATED = "0"


def format_rating(total: int, count: int) -> str:
    """
    Format the mean of ``count`` ratings summing to ``total``.

    Rounded half-up to one decimal and always rendered with one decimal
    digit, except for an unrated project which is "0".

    >>> format_rating(9, 2)
    '4.5'
    >>> format_rating(4, 1)
    '4.0'
    >>> format_rating(0, 0)
    '0'
    """
    if count <= 0:
        return UNRATED
    mean = Decimal(total) / Decimal(count)
    return str(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def project_fields(project: ProjectFields) -> dict[str, Any]:
    """The storable subset of a project payload, keyed by column name."""
    return project.model_dump(include=set(MUTABLE_PROJECT_FIELDS))


class StorageBackend(ABC):
    """Capability set every persistence backend provides."""

    # --- Users ---

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        """Return the user with this id, or None."""

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        """
        Return the user with this username, or None.

        The lookup key is trimmed and lower-cased first. Should the store
        ever hold duplicates, the oldest row wins.
        """

    @abstractmethod
    async def create_user(
        self,
        username: str,
        password: str,
        role: str = "user",
    ) -> UserRecord:
        """
        Insert a user. ``password`` must already be hashed.

        Raises:
            ConflictError: username already taken
            ValidationError: unknown role
        """

    @abstractmethod
    async def update_user(self, user_id: str, changes: dict[str, Any]) -> UserRecord:
        """
        Partially update username, password hash and/or profile picture.

        Raises:
            NotFound: no such user
            ConflictError: new username already taken
        """

    # --- Projects ---

    @abstractmethod
    async def get_projects(self) -> list[ProjectRecord]:
        """All projects, newest first."""

    @abstractmethod
    async def get_projects_by_category(self, category: str) -> list[ProjectRecord]:
        """Projects whose category matches exactly."""

    @abstractmethod
    async def get_projects_by_user(self, user_id: str) -> list[ProjectRecord]:
        """Projects owned by ``user_id``."""

    @abstractmethod
    async def get_project_by_id(self, project_id: str) -> Optional[ProjectRecord]:
        """Return the project, or None."""

    @abstractmethod
    async def create_project(
        self,
        project: ProjectFields,
        owner_id: Optional[str] = None,
    ) -> ProjectRecord:
        """Insert a project with rating "0", rating_count 0, not featured."""

    @abstractmethod
    async def update_project(self, project_id: str, project: ProjectFields) -> ProjectRecord:
        """
        Overwrite the mutable fields of a project.

        Raises:
            NotFound: no such project
        """

    @abstractmethod
    async def delete_project(self, project_id: str) -> None:
        """
        Delete a project together with its ratings.

        Raises:
            NotFound: no such project
        """

    # --- Ratings ---

    @abstractmethod
    async def submit_rating(
        self,
        rating: RatingSubmission,
    ) -> tuple[RatingRecord, ProjectRecord]:
        """
        Insert a rating and recompute the project's rating/rating_count.

        Insert, recompute and project update form one atomic unit, and
        concurrent submissions for the same project never lose an update.

        Raises:
            NotFound: project or user does not exist
        """

    @abstractmethod
    async def get_ratings_for_project(self, project_id: str) -> list[RatingRecord]:
        """Ratings of a project, oldest first."""

    # --- Featured project ---

    @abstractmethod
    async def get_featured_project(self) -> Optional[ProjectRecord]:
        """The featured project, or None."""

    @abstractmethod
    async def set_featured_project(self, project_id: str) -> ProjectRecord:
        """
        Feature ``project_id`` and un-feature every other project atomically.

        Raises:
            NotFound: no such project
        """

    # --- Lifecycle ---

    @abstractmethod
    async def ping(self) -> None:
        """Raise BackendError if the store is unreachable."""

    async def close(self) -> None:
        """Release connections. Called once at shutdown."""
