"""
Common dependencies for GetStreetCred API endpoints.

Provides the injected storage backend and caller identity resolution.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from streetcred.core.config import Settings, get_settings
from streetcred.core.errors import Forbidden, NotConfigured, Unauthorized
from streetcred.core.security import decode_token
from streetcred.storage.base import StorageBackend

# HTTP Bearer token scheme; tokens are optional while asserted identity is trusted
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Caller:
    """Who is making the request."""

    user_id: Optional[str]
    role: str = "user"
    verified: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def can_modify(self, owner_id: Optional[str]) -> bool:
        """Admins may modify anything; others only what they own."""
        if self.is_admin:
            return True
        return self.user_id is not None and self.user_id == owner_id


def get_storage(request: Request) -> StorageBackend:
    """
    Storage backend dependency.

    Returns the backend constructed at startup (see main.lifespan).

    Usage:
        @router.get("/items")
        async def get_items(storage: StorageBackend = Depends(get_storage)):
            ...
    """
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise NotConfigured("Storage backend not initialized")
    return storage


async def get_token_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """
    User id from the Authorization bearer token, or None if no token was sent.

    Raises:
        Unauthorized: token present but invalid or expired
    """
    if credentials is None:
        return None
    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise Unauthorized("Invalid or expired token")
    user_id = payload.get("sub")
    if not user_id:
        raise Unauthorized("Invalid or expired token")
    return user_id


async def get_token_caller(
    user_id: Optional[str] = Depends(get_token_user_id),
    storage: StorageBackend = Depends(get_storage),
) -> Optional[Caller]:
    """
    Verified caller from the bearer token; the role is read from storage.

    Raises:
        Unauthorized: token refers to a user that no longer exists
    """
    if user_id is None:
        return None
    user = await storage.get_user(user_id)
    if user is None:
        raise Unauthorized("Invalid or expired token")
    return Caller(user_id=user.id, role=user.role, verified=True)


def resolve_caller(
    token_caller: Optional[Caller],
    asserted_user_id: Optional[str],
    asserted_role: Optional[str],
    settings: Optional[Settings] = None,
) -> Caller:
    """
    Decide who the caller is for a request.

    A verified token always wins. Otherwise the userId/userRole from the
    request body are taken at face value when TRUST_CLIENT_IDENTITY is on.
    That path is spoofable and kept only for clients that do not send
    tokens yet.

    Raises:
        Unauthorized: no token and asserted identity is not trusted
    """
    if token_caller is not None:
        return token_caller
    settings = settings or get_settings()
    if not settings.trust_client_identity:
        raise Unauthorized("Authentication required")
    return Caller(user_id=asserted_user_id, role=asserted_role or "user")


def require_admin(caller: Caller, action: str) -> None:
    """Raise Forbidden unless the caller is an admin."""
    if not caller.is_admin:
        raise Forbidden(f"Only admins can {action}")


__all__ = [
    "Caller",
    "bearer_scheme",
    "get_storage",
    "get_token_caller",
    "get_token_user_id",
    "require_admin",
    "resolve_caller",
]
