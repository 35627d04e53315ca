"""
Unit tests for the SQL storage backend.

Exercises SqlStorage directly (no HTTP): user uniqueness, the rating
aggregate under concurrent submissions, the single-featured invariant
and rating cleanup on delete.
"""

import asyncio
import uuid
from pathlib import Path

import pytest
import pytest_asyncio

from streetcred.core.database import build_engine
from streetcred.core.errors import ConflictError, NotFound, ValidationError
from streetcred.schemas.project import ProjectFields
from streetcred.schemas.rating import RatingSubmission
from streetcred.storage.sql import RATING_LOCK_STRIPES, SqlStorage


def sample_project(**overrides) -> ProjectFields:
    fields = {
        "name": "Golden Gate Bridge",
        "location": "San Francisco, USA",
        "description": "Suspension bridge across the Golden Gate strait",
        "image_url": "https://example.com/ggb.jpg",
        "category": "Bridge",
        "completion_year": 1937,
    }
    fields.update(overrides)
    return ProjectFields(**fields)


@pytest_asyncio.fixture
async def owner(storage: SqlStorage):
    return await storage.create_user("owner@example.com", "hashed")


@pytest_asyncio.fixture
async def project(storage: SqlStorage, owner):
    return await storage.create_project(sample_project(), owner_id=owner.id)


class TestUsers:
    """Tests for user storage."""

    @pytest.mark.asyncio
    async def test_username_is_normalized(self, storage: SqlStorage):
        user = await storage.create_user("  Mixed@Case.COM ", "hashed")

        assert user.username == "mixed@case.com"
        assert (await storage.get_user_by_username("MIXED@case.com")).id == user.id

    @pytest.mark.asyncio
    async def test_duplicate_username(self, storage: SqlStorage, owner):
        with pytest.raises(ConflictError):
            await storage.create_user("OWNER@example.com", "hashed")

    @pytest.mark.asyncio
    async def test_unknown_role(self, storage: SqlStorage):
        with pytest.raises(ValidationError):
            await storage.create_user("x@example.com", "hashed", role="superuser")

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_field(self, storage: SqlStorage, owner):
        with pytest.raises(ValidationError):
            await storage.update_user(owner.id, {"role": "admin"})

        assert (await storage.get_user(owner.id)).role == "user"

    @pytest.mark.asyncio
    async def test_update_missing_user(self, storage: SqlStorage):
        with pytest.raises(NotFound):
            await storage.update_user(str(uuid.uuid4()), {"username": "a@b.c"})


class TestProjects:
    """Tests for project storage."""

    @pytest.mark.asyncio
    async def test_new_project_is_unrated(self, project):
        assert project.rating == "0"
        assert project.rating_count == 0
        assert project.is_featured is False

    @pytest.mark.asyncio
    async def test_update_keeps_aggregates(self, storage: SqlStorage, project, owner):
        await storage.submit_rating(
            RatingSubmission(project_id=project.id, user_id=owner.id, rating=5)
        )

        updated = await storage.update_project(project.id, sample_project(name="Renamed"))

        assert updated.name == "Renamed"
        assert updated.rating == "5.0"
        assert updated.rating_count == 1

    @pytest.mark.asyncio
    async def test_delete_cascades_ratings(self, storage: SqlStorage, project, owner):
        await storage.submit_rating(
            RatingSubmission(project_id=project.id, user_id=owner.id, rating=3)
        )

        await storage.delete_project(project.id)

        assert await storage.get_project_by_id(project.id) is None
        assert await storage.get_ratings_for_project(project.id) == []

    @pytest.mark.asyncio
    async def test_unknown_owner_is_validation_error(self, storage: SqlStorage):
        """A dangling owner id is rejected the same way as by the REST backend."""
        with pytest.raises(ValidationError) as exc_info:
            await storage.create_project(sample_project(), owner_id=str(uuid.uuid4()))

        assert exc_info.value.status_code == 400
        assert await storage.get_projects() == []

    @pytest.mark.asyncio
    async def test_delete_missing(self, storage: SqlStorage):
        with pytest.raises(NotFound):
            await storage.delete_project(str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_projects_by_category_and_user(self, storage: SqlStorage, project, owner):
        await storage.create_project(sample_project(name="Burj Khalifa", category="Skyscraper"))

        assert [p.id for p in await storage.get_projects_by_category("Bridge")] == [project.id]
        assert [p.id for p in await storage.get_projects_by_user(owner.id)] == [project.id]
        assert len(await storage.get_projects()) == 2


class TestRatings:
    """Tests for rating submission and aggregation."""

    @pytest.mark.asyncio
    async def test_submit_returns_rating_and_project(self, storage: SqlStorage, project, owner):
        rating, updated = await storage.submit_rating(
            RatingSubmission(project_id=project.id, user_id=owner.id, rating=4, review="Nice")
        )

        assert rating.rating == 4
        assert rating.review == "Nice"
        assert updated.rating == "4.0"
        assert updated.rating_count == 1

    @pytest.mark.asyncio
    async def test_missing_project(self, storage: SqlStorage, owner):
        with pytest.raises(NotFound):
            await storage.submit_rating(
                RatingSubmission(project_id=str(uuid.uuid4()), user_id=owner.id, rating=4)
            )

    @pytest.mark.asyncio
    async def test_missing_user_leaves_aggregate(self, storage: SqlStorage, project):
        with pytest.raises(NotFound):
            await storage.submit_rating(
                RatingSubmission(project_id=project.id, user_id=str(uuid.uuid4()), rating=4)
            )

        unchanged = await storage.get_project_by_id(project.id)
        assert unchanged.rating_count == 0
        assert await storage.get_ratings_for_project(project.id) == []

    @pytest.mark.asyncio
    async def test_lock_set_stays_bounded(self, storage: SqlStorage, owner):
        """Submissions for arbitrary project ids never grow the lock set."""
        for _ in range(500):
            with pytest.raises(NotFound):
                await storage.submit_rating(
                    RatingSubmission(project_id=str(uuid.uuid4()), user_id=owner.id, rating=3)
                )

        assert len(storage._rating_locks) == RATING_LOCK_STRIPES

    @pytest.mark.asyncio
    async def test_same_project_same_lock(self, storage: SqlStorage):
        assert storage._rating_lock("p1") is storage._rating_lock("p1")

    @pytest.mark.asyncio
    async def test_concurrent_submissions_are_all_counted(self, tmp_path: Path):
        """Parallel submissions never lose an update to the aggregate."""
        engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'ratings.db'}")
        file_storage = SqlStorage(engine)
        await file_storage.create_tables()
        try:
            user = await file_storage.create_user("rater@example.com", "hashed")
            project = await file_storage.create_project(sample_project())
            scores = [(i % 5) + 1 for i in range(20)]

            await asyncio.gather(*[
                file_storage.submit_rating(
                    RatingSubmission(project_id=project.id, user_id=user.id, rating=score)
                )
                for score in scores
            ])

            final = await file_storage.get_project_by_id(project.id)
            assert final.rating_count == len(scores)
            assert final.rating == "3.0"
            assert len(await file_storage.get_ratings_for_project(project.id)) == len(scores)
        finally:
            await file_storage.close()


class TestFeatured:
    """Tests for the single featured project."""

    @pytest.mark.asyncio
    async def test_none_featured(self, storage: SqlStorage, project):
        assert await storage.get_featured_project() is None

    @pytest.mark.asyncio
    async def test_featuring_is_exclusive(self, storage: SqlStorage, project):
        other = await storage.create_project(sample_project(name="Hoover Dam", category="Dam"))

        await storage.set_featured_project(project.id)
        await storage.set_featured_project(other.id)

        featured = [p for p in await storage.get_projects() if p.is_featured]
        assert [p.id for p in featured] == [other.id]
        assert (await storage.get_featured_project()).id == other.id

    @pytest.mark.asyncio
    async def test_concurrent_featuring_leaves_one(self, storage: SqlStorage, project):
        others = [
            await storage.create_project(sample_project(name=f"Tower {i}"))
            for i in range(5)
        ]

        await asyncio.gather(*[storage.set_featured_project(p.id) for p in others])

        featured = [p for p in await storage.get_projects() if p.is_featured]
        assert len(featured) == 1

    @pytest.mark.asyncio
    async def test_feature_missing_project(self, storage: SqlStorage, project):
        await storage.set_featured_project(project.id)

        with pytest.raises(NotFound):
            await storage.set_featured_project(str(uuid.uuid4()))

        assert (await storage.get_featured_project()).id == project.id

    @pytest.mark.asyncio
    async def test_ping(self, storage: SqlStorage):
        await storage.ping()
