"""
Converge - Main Application

FastAPI backend with:
- SQL database for projects, teams, requests and profiles
- JWT authentication
- Team invitations and post-completion rating requests

Run: uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.errors import register_exception_handlers
from app.core.logging_config import setup_logging
from app.db.database import init_db, test_db_connection

settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup."""
    try:
        init_db()
    except Exception as e:
        logger.error("Database initialization failed: %s", e)
        raise
    yield


# Create FastAPI app
app = FastAPI(
    title="Converge",
    description="""
    Match students and professionals into project teams.

    ## Features
    - **Authentication**: JWT bearer tokens
    - **Profiles**: Basic profile used to resolve teammates
    - **Projects**: Create, explore and complete projects
    - **Teammates**: Owner invites, invitee accepts or rejects
    - **Ratings**: Completing a project asks every member to rate every other member
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS middleware (allow all when no origins are configured)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "connected" if test_db_connection() else "disconnected"
    }
