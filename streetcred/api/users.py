"""
User profile endpoints for GetStreetCred.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from streetcred.api.deps import Caller, get_storage, get_token_caller, resolve_caller
from streetcred.core.errors import Forbidden, NotFound, ValidationError
from streetcred.core.security import hash_password
from streetcred.schemas.common import ErrorResponse
from streetcred.schemas.project import ProjectRecord
from streetcred.schemas.user import AuthUserResponse, ProfileUpdate
from streetcred.storage.base import StorageBackend

logger = logging.getLogger(__name__)

router = APIRouter()


@router.patch(
    "/user/profile",
    response_model=AuthUserResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Update own profile",
)
async def update_profile(
    data: ProfileUpdate,
    storage: StorageBackend = Depends(get_storage),
    token_caller: Optional[Caller] = Depends(get_token_caller),
) -> AuthUserResponse:
    """
    Change username, password and/or profile picture.

    Token callers update themselves (admins may name another userId).
    Without a token the body's userId selects the user.
    """
    caller = resolve_caller(token_caller, data.user_id, data.user_role)
    target_id = caller.user_id
    if caller.verified and data.user_id and data.user_id != caller.user_id:
        if not caller.is_admin:
            raise Forbidden("Cannot update another user's profile")
        target_id = data.user_id
    if not target_id:
        raise ValidationError("User ID required")

    if await storage.get_user(target_id) is None:
        raise NotFound("user", target_id)

    changes = {}
    if data.username:
        changes["username"] = data.username
    if data.password:
        changes["password"] = hash_password(data.password)
    if data.profile_picture_url is not None:
        changes["profile_picture_url"] = data.profile_picture_url or None

    if not changes:
        raise ValidationError("No fields to update")

    user = await storage.update_user(target_id, changes)
    logger.info(f"Updated profile of user {user.id}: {sorted(changes)}")
    return AuthUserResponse.from_record(user)


@router.get(
    "/user-projects/{user_id}",
    response_model=list[ProjectRecord],
    summary="List projects created by a user",
)
async def list_user_projects(
    user_id: str,
    storage: StorageBackend = Depends(get_storage),
) -> list[ProjectRecord]:
    return await storage.get_projects_by_user(user_id)
