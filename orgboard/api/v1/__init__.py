"""
API v1 Router

Every resource is mounted under /api/v1; all routes except the auth ones
require a bearer access token.
"""

from fastapi import APIRouter

from . import auth, comments, organizations, projects, tasks, users

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(organizations.router, prefix="/organizations", tags=["Organizations"])
router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
router.include_router(comments.router, prefix="/comments", tags=["Comments"])


@router.get("/", tags=["API"])
async def api_root():
    """API root: returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/auth",
            "/users",
            "/organizations",
            "/projects",
            "/tasks",
            "/comments",
        ],
    }
