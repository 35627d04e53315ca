"""
Featured project and sample-data endpoints for GetStreetCred.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, status

from streetcred.api.deps import (
    Caller,
    get_storage,
    get_token_caller,
    require_admin,
    resolve_caller,
)
from streetcred.core.errors import NotFound
from streetcred.schemas.common import ErrorResponse
from streetcred.schemas.project import CallerAssertion, ProjectRecord, SeedResponse
from streetcred.services.seed import seed_sample_projects
from streetcred.storage.base import StorageBackend

router = APIRouter()


@router.get(
    "/featured-project",
    response_model=ProjectRecord,
    responses={404: {"model": ErrorResponse}},
    summary="Get the featured project",
)
async def get_featured_project(
    storage: StorageBackend = Depends(get_storage),
) -> ProjectRecord:
    project = await storage.get_featured_project()
    if project is None:
        raise NotFound("featured project")
    return project


@router.post(
    "/seed-projects",
    response_model=SeedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": ErrorResponse}},
    summary="Insert the sample landmark projects (admin only)",
)
async def seed_projects(
    data: Optional[CallerAssertion] = Body(default=None),
    storage: StorageBackend = Depends(get_storage),
    token_caller: Optional[Caller] = Depends(get_token_caller),
) -> SeedResponse:
    data = data or CallerAssertion()
    caller = resolve_caller(token_caller, data.user_id, data.user_role)
    require_admin(caller, "seed projects")
    projects = await seed_sample_projects(storage)
    return SeedResponse(
        message=f"Successfully seeded {len(projects)} projects",
        projects=projects,
    )
