"""
Supabase (PostgREST) storage backend.

Talks to the Supabase REST interface with httpx. Rows travel in the
persisted snake_case shape; payloads are converted with the casing helpers
on the way out and rows on the way back. Steps that must be atomic
(rating submission, featuring) run as Postgres functions through
``/rest/v1/rpc``; they are created by the PostgreSQL-only Alembic
migration ``002_rest_rpc_functions``.
"""

import logging
from typing import Any, Optional

import httpx

from streetcred.core.casing import to_storage, to_wire
from streetcred.core.errors import (
    BackendError,
    ConflictError,
    NotConfigured,
    NotFound,
    ValidationError,
)
from streetcred.schemas.project import ProjectFields, ProjectRecord
from streetcred.schemas.rating import RatingRecord, RatingSubmission
from streetcred.schemas.user import UserRecord, normalize_username

from .base import (
    MUTABLE_PROJECT_FIELDS,
    MUTABLE_USER_FIELDS,
    VALID_ROLES,
    StorageBackend,
    format_rating,
)

logger = logging.getLogger(__name__)

# Postgres SQLSTATE codes surfaced by PostgREST in the "code" field
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
INVALID_TEXT_REPRESENTATION = "22P02"
RAISE_NO_DATA_FOUND = "P0002"

RETURN_REPRESENTATION = {"Prefer": "return=representation"}


def _project(row: dict[str, Any]) -> ProjectRecord:
    return ProjectRecord.model_validate(to_wire(row))


def _rating(row: dict[str, Any]) -> RatingRecord:
    return RatingRecord.model_validate(to_wire(row))


def _user(row: dict[str, Any]) -> UserRecord:
    return UserRecord.model_validate(to_wire(row))


def _project_payload(project: ProjectFields) -> dict[str, Any]:
    return to_storage(
        project.model_dump(by_alias=True, include=set(MUTABLE_PROJECT_FIELDS))
    )


class SupabaseStorage(StorageBackend):
    """
    StorageBackend over the Supabase REST API.

    Constructed once at startup; the underlying httpx.AsyncClient is
    reused for every request and closed at shutdown.
    """

    def __init__(
        self,
        url: Optional[str],
        api_key: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not url or not api_key or not url.startswith("https://"):
            raise NotConfigured(
                "Supabase not configured: set SUPABASE_URL (https://...) and SUPABASE_ANON_KEY"
            )

        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, str]] = None,
        json: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """
        Perform a PostgREST request and return the decoded JSON body.

        Raises:
            ConflictError: unique violation (HTTP 409 / SQLSTATE 23505)
            NotFound: an RPC function raised no_data_found
            ValidationError: malformed identifier or dangling foreign key
            BackendError: any other failure, including transport errors
        """
        logger.debug(f"PostgREST {method} {path} params={params}")
        try:
            response = await self._client.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.TimeoutException as e:
            logger.error(f"PostgREST timeout: {method} {path}")
            raise BackendError("Storage backend timed out") from e
        except httpx.RequestError as e:
            logger.error(f"PostgREST connection error: {e}")
            raise BackendError(f"Storage backend unreachable: {e}") from e

        if response.is_success:
            if not response.content:
                return None
            return response.json()

        try:
            error = response.json()
        except ValueError:
            error = {"message": response.text[:200]}
        code = error.get("code") if isinstance(error, dict) else None
        message = error.get("message", "") if isinstance(error, dict) else str(error)

        if code == RAISE_NO_DATA_FOUND:
            raise NotFound(message or "resource")
        if code in (INVALID_TEXT_REPRESENTATION, FOREIGN_KEY_VIOLATION):
            raise ValidationError(message or "Invalid reference")
        if code == UNIQUE_VIOLATION or response.status_code == 409:
            raise ConflictError(message or "Conflicting write rejected by the database")

        logger.error(f"PostgREST {method} {path} failed: {response.status_code} {message}")
        raise BackendError(f"Storage backend error ({response.status_code}): {message}")

    async def _select(self, table: str, **filters: str) -> list[dict[str, Any]]:
        params = {"select": "*", **filters}
        return await self._request("GET", f"/{table}", params=params) or []

    # --- Users ---

    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        rows = await self._select("users", id=f"eq.{user_id}")
        return _user(rows[0]) if rows else None

    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        rows = await self._select(
            "users",
            username=f"eq.{normalize_username(username)}",
            order="created_at.asc",
            limit="1",
        )
        return _user(rows[0]) if rows else None

    async def create_user(
        self,
        username: str,
        password: str,
        role: str = "user",
    ) -> UserRecord:
        if role not in VALID_ROLES:
            raise ValidationError(f"Unknown role: {role}")
        payload = {"username": normalize_username(username), "password": password, "role": role}
        try:
            rows = await self._request(
                "POST", "/users", json=[payload], headers=RETURN_REPRESENTATION
            )
        except ConflictError as e:
            raise ConflictError("Username already exists") from e
        return _user(rows[0])

    async def update_user(self, user_id: str, changes: dict[str, Any]) -> UserRecord:
        unknown = set(changes) - MUTABLE_USER_FIELDS
        if unknown:
            raise ValidationError(f"Field cannot be updated: {', '.join(sorted(unknown))}")
        payload = dict(changes)
        if "username" in payload:
            payload["username"] = normalize_username(payload["username"])
        try:
            rows = await self._request(
                "PATCH",
                "/users",
                params={"id": f"eq.{user_id}"},
                json=payload,
                headers=RETURN_REPRESENTATION,
            )
        except ConflictError as e:
            raise ConflictError("Username already exists") from e
        if not rows:
            raise NotFound("user", user_id)
        return _user(rows[0])

    # --- Projects ---

    async def get_projects(self) -> list[ProjectRecord]:
        rows = await self._select("projects", order="created_at.desc")
        return [_project(row) for row in rows]

    async def get_projects_by_category(self, category: str) -> list[ProjectRecord]:
        rows = await self._select("projects", category=f"eq.{category}", order="created_at.desc")
        return [_project(row) for row in rows]

    async def get_projects_by_user(self, user_id: str) -> list[ProjectRecord]:
        rows = await self._select("projects", user_id=f"eq.{user_id}", order="created_at.desc")
        return [_project(row) for row in rows]

    async def get_project_by_id(self, project_id: str) -> Optional[ProjectRecord]:
        rows = await self._select("projects", id=f"eq.{project_id}")
        return _project(rows[0]) if rows else None

    async def create_project(
        self,
        project: ProjectFields,
        owner_id: Optional[str] = None,
    ) -> ProjectRecord:
        payload = _project_payload(project)
        payload.update(
            rating=format_rating(0, 0),
            rating_count=0,
            is_featured=False,
            user_id=owner_id,
        )
        rows = await self._request(
            "POST", "/projects", json=[payload], headers=RETURN_REPRESENTATION
        )
        created = _project(rows[0])
        logger.info(f"Created project {created.id} ({created.name!r}) owner={owner_id}")
        return created

    async def update_project(self, project_id: str, project: ProjectFields) -> ProjectRecord:
        payload = _project_payload(project)
        rows = await self._request(
            "PATCH",
            "/projects",
            params={"id": f"eq.{project_id}"},
            json=payload,
            headers=RETURN_REPRESENTATION,
        )
        if not rows:
            raise NotFound("project", project_id)
        return _project(rows[0])

    async def delete_project(self, project_id: str) -> None:
        # ratings.project_id cascades on delete
        rows = await self._request(
            "DELETE",
            "/projects",
            params={"id": f"eq.{project_id}"},
            headers=RETURN_REPRESENTATION,
        )
        if not rows:
            raise NotFound("project", project_id)
        logger.info(f"Deleted project {project_id}")

    # --- Ratings ---

    async def submit_rating(
        self,
        rating: RatingSubmission,
    ) -> tuple[RatingRecord, ProjectRecord]:
        result = await self._request(
            "POST",
            "/rpc/submit_rating",
            json={
                "p_project_id": rating.project_id,
                "p_user_id": rating.user_id,
                "p_rating": rating.rating,
                "p_review": rating.review,
            },
        )
        if not result:
            raise NotFound("project", rating.project_id)
        return _rating(result["rating"]), _project(result["project"])

    async def get_ratings_for_project(self, project_id: str) -> list[RatingRecord]:
        rows = await self._select("ratings", project_id=f"eq.{project_id}", order="created_at.asc")
        return [_rating(row) for row in rows]

    # --- Featured project ---

    async def get_featured_project(self) -> Optional[ProjectRecord]:
        rows = await self._select("projects", is_featured="is.true", limit="1")
        return _project(rows[0]) if rows else None

    async def set_featured_project(self, project_id: str) -> ProjectRecord:
        row = await self._request(
            "POST",
            "/rpc/set_featured_project",
            json={"p_project_id": project_id},
        )
        if not row:
            raise NotFound("project", project_id)
        logger.info(f"Featured project is now {project_id}")
        return _project(row)

    # --- Lifecycle ---

    async def ping(self) -> None:
        await self._request("GET", "/projects", params={"select": "id", "limit": "1"})

    async def close(self) -> None:
        await self._client.aclose()
