"""
SQL storage backend.

Talks to any SQLAlchemy async URL: sqlite+aiosqlite for development and
tests, postgresql+asyncpg for Supabase/Postgres. Every operation runs in
its own session and commits before returning.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from sqlalchemy import delete, func, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from streetcred.core.database import build_session_factory, create_all_tables
from streetcred.core.errors import BackendError, ConflictError, NotFound, ValidationError
from streetcred.models.project import Project
from streetcred.models.rating import Rating
from streetcred.models.user import User
from streetcred.schemas.project import ProjectFields, ProjectRecord
from streetcred.schemas.rating import RatingRecord, RatingSubmission
from streetcred.schemas.user import UserRecord, normalize_username

from .base import (
    MUTABLE_USER_FIELDS,
    VALID_ROLES,
    StorageBackend,
    format_rating,
    project_fields,
)

logger = logging.getLogger(__name__)

# Rating submissions for one project serialize on one of a fixed set of locks
RATING_LOCK_STRIPES = 64

FOREIGN_KEY_VIOLATION = "23503"


def is_foreign_key_violation(error: IntegrityError) -> bool:
    """True for a dangling reference (Postgres SQLSTATE 23503 or SQLite FK failure)."""
    orig = error.orig
    if getattr(orig, "sqlstate", None) == FOREIGN_KEY_VIOLATION:
        return True
    return "foreign key" in str(orig).lower()


class SqlStorage(StorageBackend):
    """
    StorageBackend over SQLAlchemy tables.

    Rating aggregation holds an asyncio lock (one of a fixed set, picked by
    hashing the project id) and a row lock
    (SELECT ... FOR UPDATE, a no-op on SQLite) on the project for the whole
    insert/recompute/update transaction. Featuring holds a process-wide lock
    and is backed by the partial unique index on projects.is_featured.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory = build_session_factory(engine)
        self._rating_locks = [asyncio.Lock() for _ in range(RATING_LOCK_STRIPES)]
        self._featured_lock = asyncio.Lock()

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """
        Session scoped to one storage operation.

        Commits on success. SQLAlchemy errors are rolled back and wrapped:
        a dangling foreign key becomes ValidationError, any other
        IntegrityError ConflictError, anything else BackendError.
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                logger.warning(f"Integrity error: {e.orig}")
                if is_foreign_key_violation(e):
                    raise ValidationError("Invalid reference") from e
                raise ConflictError("Conflicting write rejected by the database") from e
            except SQLAlchemyError as e:
                await session.rollback()
                logger.exception("Database operation failed")
                raise BackendError("Database operation failed") from e
            except Exception:
                await session.rollback()
                raise

    def _rating_lock(self, project_id: str) -> asyncio.Lock:
        return self._rating_locks[hash(project_id) % len(self._rating_locks)]

    async def create_tables(self) -> None:
        """Create missing tables (development / tests)."""
        await create_all_tables(self.engine)

    # --- Users ---

    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        async with self._session() as session:
            user = await session.get(User, user_id)
            return UserRecord.model_validate(user) if user else None

    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        async with self._session() as session:
            result = await session.execute(
                select(User)
                .where(User.username == normalize_username(username))
                .order_by(User.created_at)
                .limit(1)
            )
            user = result.scalars().first()
            return UserRecord.model_validate(user) if user else None

    async def create_user(
        self,
        username: str,
        password: str,
        role: str = "user",
    ) -> UserRecord:
        if role not in VALID_ROLES:
            raise ValidationError(f"Unknown role: {role}")

        async with self._session() as session:
            user = User(
                username=normalize_username(username),
                password=password,
                role=role,
            )
            session.add(user)
            try:
                await session.flush()
            except IntegrityError as e:
                raise ConflictError("Username already exists") from e
            await session.refresh(user)
            logger.info(f"Created user {user.id} with role {user.role}")
            return UserRecord.model_validate(user)

    async def update_user(self, user_id: str, changes: dict[str, Any]) -> UserRecord:
        async with self._session() as session:
            user = await session.get(User, user_id)
            if user is None:
                raise NotFound("user", user_id)

            for field, value in changes.items():
                if field not in MUTABLE_USER_FIELDS:
                    raise ValidationError(f"Field cannot be updated: {field}")
                if field == "username":
                    value = normalize_username(value)
                setattr(user, field, value)

            try:
                await session.flush()
            except IntegrityError as e:
                raise ConflictError("Username already exists") from e
            return UserRecord.model_validate(user)

    # --- Projects ---

    async def get_projects(self) -> list[ProjectRecord]:
        async with self._session() as session:
            result = await session.execute(
                select(Project).order_by(Project.created_at.desc())
            )
            return [ProjectRecord.model_validate(p) for p in result.scalars().all()]

    async def get_projects_by_category(self, category: str) -> list[ProjectRecord]:
        async with self._session() as session:
            result = await session.execute(
                select(Project)
                .where(Project.category == category)
                .order_by(Project.created_at.desc())
            )
            return [ProjectRecord.model_validate(p) for p in result.scalars().all()]

    async def get_projects_by_user(self, user_id: str) -> list[ProjectRecord]:
        async with self._session() as session:
            result = await session.execute(
                select(Project)
                .where(Project.user_id == user_id)
                .order_by(Project.created_at.desc())
            )
            return [ProjectRecord.model_validate(p) for p in result.scalars().all()]

    async def get_project_by_id(self, project_id: str) -> Optional[ProjectRecord]:
        async with self._session() as session:
            project = await session.get(Project, project_id)
            return ProjectRecord.model_validate(project) if project else None

    async def create_project(
        self,
        project: ProjectFields,
        owner_id: Optional[str] = None,
    ) -> ProjectRecord:
        async with self._session() as session:
            row = Project(
                **project_fields(project),
                rating=format_rating(0, 0),
                rating_count=0,
                is_featured=False,
                user_id=owner_id,
            )
            session.add(row)
            await session.flush()
            await session.refresh(row)
            logger.info(f"Created project {row.id} ({row.name!r}) owner={owner_id}")
            return ProjectRecord.model_validate(row)

    async def update_project(self, project_id: str, project: ProjectFields) -> ProjectRecord:
        async with self._session() as session:
            row = await session.get(Project, project_id)
            if row is None:
                raise NotFound("project", project_id)

            for field, value in project_fields(project).items():
                setattr(row, field, value)

            await session.flush()
            return ProjectRecord.model_validate(row)

    async def delete_project(self, project_id: str) -> None:
        async with self._session() as session:
            await session.execute(delete(Rating).where(Rating.project_id == project_id))
            result = await session.execute(delete(Project).where(Project.id == project_id))
            if result.rowcount == 0:
                raise NotFound("project", project_id)
        logger.info(f"Deleted project {project_id}")

    # --- Ratings ---

    async def submit_rating(
        self,
        rating: RatingSubmission,
    ) -> tuple[RatingRecord, ProjectRecord]:
        async with self._rating_lock(rating.project_id):
            async with self._session() as session:
                result = await session.execute(
                    select(Project)
                    .where(Project.id == rating.project_id)
                    .with_for_update()
                )
                project = result.scalar_one_or_none()
                if project is None:
                    raise NotFound("project", rating.project_id)
                if await session.get(User, rating.user_id) is None:
                    raise NotFound("user", rating.user_id)

                row = Rating(
                    project_id=rating.project_id,
                    user_id=rating.user_id,
                    rating=rating.rating,
                    review=rating.review,
                )
                session.add(row)
                await session.flush()

                aggregate = await session.execute(
                    select(func.count(Rating.id), func.coalesce(func.sum(Rating.rating), 0))
                    .where(Rating.project_id == rating.project_id)
                )
                count, total = aggregate.one()

                project.rating_count = count
                project.rating = format_rating(total, count)
                await session.flush()
                await session.refresh(row)

                logger.info(
                    f"Rating {row.id} on project {project.id}: "
                    f"rating={project.rating} count={project.rating_count}"
                )
                return RatingRecord.model_validate(row), ProjectRecord.model_validate(project)

    async def get_ratings_for_project(self, project_id: str) -> list[RatingRecord]:
        async with self._session() as session:
            result = await session.execute(
                select(Rating)
                .where(Rating.project_id == project_id)
                .order_by(Rating.created_at)
            )
            return [RatingRecord.model_validate(r) for r in result.scalars().all()]

    # --- Featured project ---

    async def get_featured_project(self) -> Optional[ProjectRecord]:
        async with self._session() as session:
            result = await session.execute(
                select(Project).where(Project.is_featured.is_(True)).limit(1)
            )
            project = result.scalars().first()
            return ProjectRecord.model_validate(project) if project else None

    async def set_featured_project(self, project_id: str) -> ProjectRecord:
        async with self._featured_lock:
            async with self._session() as session:
                project = await session.get(Project, project_id)
                if project is None:
                    raise NotFound("project", project_id)

                await session.execute(
                    update(Project)
                    .where(Project.is_featured.is_(True), Project.id != project_id)
                    .values(is_featured=False)
                    .execution_options(synchronize_session=False)
                )
                project.is_featured = True
                await session.flush()
                logger.info(f"Featured project is now {project_id}")
                return ProjectRecord.model_validate(project)

    # --- Lifecycle ---

    async def ping(self) -> None:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise BackendError(f"Database unreachable: {e}") from e

    async def close(self) -> None:
        await self.engine.dispose()
