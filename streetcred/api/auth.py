"""
Authentication endpoints for GetStreetCred.

Provides signup, signin and current-user lookup. Signup and signin return
a JWT bearer token alongside the user.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from streetcred.api.deps import get_storage, get_token_user_id
from streetcred.core.config import get_settings
from streetcred.core.errors import NotFound, Unauthorized
from streetcred.core.security import create_access_token, hash_password, verify_password
from streetcred.schemas.common import ErrorResponse
from streetcred.schemas.user import AuthRequest, AuthSessionResponse, AuthUserResponse
from streetcred.storage.base import StorageBackend

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/signup",
    response_model=AuthSessionResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        409: {"model": ErrorResponse, "description": "Username already exists"},
    },
)
async def signup(
    data: AuthRequest,
    storage: StorageBackend = Depends(get_storage),
) -> AuthSessionResponse:
    """
    Register a new user.

    The email (already trimmed and lower-cased) becomes the username. The
    configured admin email is the only address that gets the admin role.
    """
    role = "admin" if data.email == get_settings().admin_email.strip().lower() else "user"
    user = await storage.create_user(data.email, hash_password(data.password), role=role)
    return AuthSessionResponse.for_user(user, create_access_token(user_id=user.id))


@router.post(
    "/signin",
    response_model=AuthSessionResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def signin(
    data: AuthRequest,
    storage: StorageBackend = Depends(get_storage),
) -> AuthSessionResponse:
    """
    Check credentials and return the user with a fresh access token.
    """
    user = await storage.get_user_by_username(data.email)
    if user is None or not verify_password(data.password, user.password):
        logger.info(f"Failed signin for {data.email!r}")
        raise Unauthorized("Invalid credentials")
    return AuthSessionResponse.for_user(user, create_access_token(user_id=user.id))


@router.get(
    "/me",
    response_model=Optional[AuthUserResponse],
    response_model_exclude_none=True,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid token"},
        404: {"model": ErrorResponse, "description": "User no longer exists"},
    },
)
async def me(
    user_id: Optional[str] = Depends(get_token_user_id),
    storage: StorageBackend = Depends(get_storage),
) -> Optional[AuthUserResponse]:
    """
    The user behind the bearer token, or null when no token is sent.
    """
    if user_id is None:
        return None
    user = await storage.get_user(user_id)
    if user is None:
        raise NotFound("user", user_id)
    return AuthUserResponse.from_record(user)
