"""
Project endpoints for GetStreetCred.

Listing and reading are public. Updating and deleting require the caller
to be the project owner or an admin; featuring is admin-only.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, status

from streetcred.api.deps import (
    Caller,
    get_storage,
    get_token_caller,
    require_admin,
    resolve_caller,
)
from streetcred.core.errors import Forbidden, NotFound, ValidationError
from streetcred.schemas.common import ErrorResponse, SuccessResponse
from streetcred.schemas.project import (
    CallerAssertion,
    ProjectCreate,
    ProjectRecord,
    ProjectUpdate,
)
from streetcred.schemas.rating import RatingRecord
from streetcred.storage.base import StorageBackend

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Helper Functions
# =============================================================================


async def get_project_or_404(project_id: str, storage: StorageBackend) -> ProjectRecord:
    """
    Get a project by ID.

    Raises:
        NotFound: If the project does not exist
    """
    project = await storage.get_project_by_id(project_id)
    if project is None:
        raise NotFound("project", project_id)
    return project


def authorize_owner(caller: Caller, project: ProjectRecord, action: str) -> None:
    """
    Raise Forbidden unless caller is an admin or the project owner.
    """
    if not caller.can_modify(project.user_id):
        logger.warning(
            f"Denied {action} of project {project.id} for user {caller.user_id} "
            f"(role={caller.role})"
        )
        raise Forbidden(f"Unauthorized to {action} this project")


# =============================================================================
# Endpoints
# =============================================================================


@router.get(
    "",
    response_model=list[ProjectRecord],
    summary="List all projects",
)
async def list_projects(
    storage: StorageBackend = Depends(get_storage),
) -> list[ProjectRecord]:
    """All projects, newest first. Filtering and sorting happen client-side."""
    return await storage.get_projects()


@router.get(
    "/category/{category}",
    response_model=list[ProjectRecord],
    summary="List projects in a category",
)
async def list_projects_by_category(
    category: str,
    storage: StorageBackend = Depends(get_storage),
) -> list[ProjectRecord]:
    return await storage.get_projects_by_category(category)


@router.get(
    "/{project_id}",
    response_model=ProjectRecord,
    responses={404: {"model": ErrorResponse}},
    summary="Get project details",
)
async def get_project(
    project_id: str,
    storage: StorageBackend = Depends(get_storage),
) -> ProjectRecord:
    return await get_project_or_404(project_id, storage)


@router.post(
    "",
    response_model=ProjectRecord,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Create new project",
)
async def create_project(
    data: ProjectCreate,
    storage: StorageBackend = Depends(get_storage),
    token_caller: Optional[Caller] = Depends(get_token_caller),
) -> ProjectRecord:
    """
    Create a project owned by the caller.

    Any caller may create projects. The project always starts unrated;
    rating fields in the body are ignored.
    """
    caller = resolve_caller(token_caller, data.user_id, None)
    if caller.user_id is not None and not caller.verified:
        if await storage.get_user(caller.user_id) is None:
            raise ValidationError("Unknown userId")
    return await storage.create_project(data, owner_id=caller.user_id)


@router.patch(
    "/{project_id}",
    response_model=ProjectRecord,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Update project",
)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    storage: StorageBackend = Depends(get_storage),
    token_caller: Optional[Caller] = Depends(get_token_caller),
) -> ProjectRecord:
    """
    Replace the mutable fields of a project (admin or owner only).
    """
    caller = resolve_caller(token_caller, data.user_id, data.user_role)
    project = await get_project_or_404(project_id, storage)
    authorize_owner(caller, project, "update")
    return await storage.update_project(project_id, data)


@router.delete(
    "/{project_id}",
    response_model=SuccessResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Delete project",
)
async def delete_project(
    project_id: str,
    data: Optional[CallerAssertion] = Body(default=None),
    storage: StorageBackend = Depends(get_storage),
    token_caller: Optional[Caller] = Depends(get_token_caller),
) -> SuccessResponse:
    """
    Delete a project and its ratings (admin or owner only).
    """
    data = data or CallerAssertion()
    caller = resolve_caller(token_caller, data.user_id, data.user_role)
    project = await get_project_or_404(project_id, storage)
    authorize_owner(caller, project, "delete")
    await storage.delete_project(project_id)
    return SuccessResponse(success=True)


@router.patch(
    "/{project_id}/feature",
    response_model=SuccessResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Feature project",
)
async def feature_project(
    project_id: str,
    data: Optional[CallerAssertion] = Body(default=None),
    storage: StorageBackend = Depends(get_storage),
    token_caller: Optional[Caller] = Depends(get_token_caller),
) -> SuccessResponse:
    """
    Make this the single featured project (admin only).
    """
    data = data or CallerAssertion()
    caller = resolve_caller(token_caller, data.user_id, data.user_role)
    require_admin(caller, "feature projects")
    await storage.set_featured_project(project_id)
    return SuccessResponse(success=True)


@router.get(
    "/{project_id}/ratings",
    response_model=list[RatingRecord],
    summary="List ratings of a project",
)
async def list_project_ratings(
    project_id: str,
    storage: StorageBackend = Depends(get_storage),
) -> list[RatingRecord]:
    return await storage.get_ratings_for_project(project_id)
