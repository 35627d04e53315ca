"""
Integration tests for rating submission and aggregation.

Tests:
- Submitting ratings updates the project's rating and ratingCount
- Validation of the score range and required fields
- Listing the ratings of a project
"""

import uuid

import pytest
from httpx import AsyncClient


class TestSubmitRating:
    """Tests for POST /api/ratings."""

    @pytest.mark.asyncio
    async def test_first_rating(
        self, async_client: AsyncClient, test_user: dict, test_project: dict
    ):
        response = await async_client.post(
            "/api/ratings",
            json={
                "projectId": test_project["id"],
                "userId": test_user["id"],
                "rating": 4,
                "review": "Solid engineering",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["rating"]["rating"] == 4
        assert data["rating"]["review"] == "Solid engineering"
        assert data["rating"]["projectId"] == test_project["id"]
        assert data["rating"]["userId"] == test_user["id"]
        assert data["updatedProject"]["id"] == test_project["id"]
        assert data["updatedProject"]["rating"] == "4.0"
        assert data["updatedProject"]["ratingCount"] == 1

    @pytest.mark.asyncio
    async def test_ratings_are_averaged(
        self,
        async_client: AsyncClient,
        test_user: dict,
        second_test_user: dict,
        test_project: dict,
    ):
        """Ratings 4 and 5 average to 4.5 over two ratings."""
        await async_client.post(
            "/api/ratings",
            json={"projectId": test_project["id"], "userId": test_user["id"], "rating": 4},
        )
        response = await async_client.post(
            "/api/ratings",
            json={"projectId": test_project["id"], "userId": second_test_user["id"], "rating": 5},
        )

        assert response.status_code == 201
        updated = response.json()["updatedProject"]
        assert updated["rating"] == "4.5"
        assert updated["ratingCount"] == 2

        project = await async_client.get(f"/api/projects/{test_project['id']}")
        assert project.json()["rating"] == "4.5"
        assert project.json()["ratingCount"] == 2

    @pytest.mark.asyncio
    async def test_same_user_may_rate_twice(
        self, async_client: AsyncClient, auth_headers: dict, test_project: dict
    ):
        for score in (1, 2):
            response = await async_client.post(
                "/api/ratings",
                json={"projectId": test_project["id"], "rating": score},
                headers=auth_headers,
            )
            assert response.status_code == 201

        updated = response.json()["updatedProject"]
        assert updated["rating"] == "1.5"
        assert updated["ratingCount"] == 2

    @pytest.mark.asyncio
    async def test_mean_rounds_half_up(
        self, async_client: AsyncClient, auth_headers: dict, test_project: dict
    ):
        """4, 4, 4, 5 averages 4.25, shown as 4.3."""
        for score in (4, 4, 4, 5):
            response = await async_client.post(
                "/api/ratings",
                json={"projectId": test_project["id"], "rating": score},
                headers=auth_headers,
            )

        assert response.json()["updatedProject"]["rating"] == "4.3"
        assert response.json()["updatedProject"]["ratingCount"] == 4

    @pytest.mark.asyncio
    async def test_blank_review_is_stored_as_null(
        self, async_client: AsyncClient, auth_headers: dict, test_project: dict
    ):
        response = await async_client.post(
            "/api/ratings",
            json={"projectId": test_project["id"], "rating": 3, "review": "   "},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["rating"]["review"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("score", [0, 6, -1])
    async def test_rating_out_of_range(
        self, async_client: AsyncClient, auth_headers: dict, test_project: dict, score: int
    ):
        response = await async_client.post(
            "/api/ratings",
            json={"projectId": test_project["id"], "rating": score},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"

        project = await async_client.get(f"/api/projects/{test_project['id']}")
        assert project.json()["ratingCount"] == 0

    @pytest.mark.asyncio
    async def test_rating_unknown_project(self, async_client: AsyncClient, auth_headers: dict):
        response = await async_client.post(
            "/api/ratings",
            json={"projectId": str(uuid.uuid4()), "rating": 4},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Project not found"

    @pytest.mark.asyncio
    async def test_rating_unknown_user(self, async_client: AsyncClient, test_project: dict):
        response = await async_client.post(
            "/api/ratings",
            json={"projectId": test_project["id"], "userId": str(uuid.uuid4()), "rating": 4},
        )

        assert response.status_code == 404
        assert response.json()["error"] == "User not found"

    @pytest.mark.asyncio
    async def test_rating_requires_user(self, async_client: AsyncClient, test_project: dict):
        response = await async_client.post(
            "/api/ratings",
            json={"projectId": test_project["id"], "rating": 4},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "userId is required"

    @pytest.mark.asyncio
    async def test_rating_missing_project_id(
        self, async_client: AsyncClient, auth_headers: dict
    ):
        response = await async_client.post(
            "/api/ratings",
            json={"rating": 4},
            headers=auth_headers,
        )

        assert response.status_code == 400


class TestListRatings:
    """Tests for GET /api/projects/{id}/ratings."""

    @pytest.mark.asyncio
    async def test_list_ratings(
        self, async_client: AsyncClient, auth_headers: dict, test_project: dict
    ):
        for score in (2, 5):
            await async_client.post(
                "/api/ratings",
                json={"projectId": test_project["id"], "rating": score},
                headers=auth_headers,
            )

        response = await async_client.get(f"/api/projects/{test_project['id']}/ratings")

        assert response.status_code == 200
        data = response.json()
        assert sorted(r["rating"] for r in data) == [2, 5]
        assert all(r["projectId"] == test_project["id"] for r in data)

    @pytest.mark.asyncio
    async def test_list_ratings_empty(self, async_client: AsyncClient, test_project: dict):
        response = await async_client.get(f"/api/projects/{test_project['id']}/ratings")

        assert response.status_code == 200
        assert response.json() == []
