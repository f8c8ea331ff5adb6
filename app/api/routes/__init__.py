"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.auth_routes import router as auth_router
from app.api.routes.profile_routes import router as profile_router
from app.api.routes.team_routes import router as team_router
from app.api.routes.project_routes import router as project_router

# Main API router
api_router = APIRouter()

# Include all sub-routers (teammate routes first: /projects/teammates/... before /projects/{id})
api_router.include_router(auth_router)
api_router.include_router(profile_router)
api_router.include_router(team_router)
api_router.include_router(project_router)
