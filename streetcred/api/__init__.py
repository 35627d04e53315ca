"""
GetStreetCred API routes package.

Contains all API endpoint routers for the application.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .featured import router as featured_router
from .projects import router as projects_router
from .ratings import router as ratings_router
from .users import router as users_router

# Main API router that includes all sub-routers
api_router = APIRouter()

# Include auth routes
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])

# Include projects routes (ratings listing and featuring are nested under projects)
api_router.include_router(projects_router, prefix="/projects", tags=["projects"])

# Include rating submission
api_router.include_router(ratings_router, prefix="/ratings", tags=["ratings"])

# Include featured project and seeding (top-level paths)
api_router.include_router(featured_router, tags=["featured"])

# Include profile and per-user project listing (top-level paths)
api_router.include_router(users_router, tags=["users"])

__all__ = [
    "api_router",
    "auth_router",
    "featured_router",
    "projects_router",
    "ratings_router",
    "users_router",
]
