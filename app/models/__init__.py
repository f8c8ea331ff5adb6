"""
Models module - Pydantic domain models.

These are the internal shapes the services pass around. The API contract
lives in app.schemas.
"""

from app.models.profile import Profile, Teammate
from app.models.project import Project, ProjectStatus, Visibility
from app.models.team import (
    JoinRequest, RatingRequest, RequestStatus, RequestType, TeamMembership, TeamRequest
)

__all__ = [
    "Profile", "Teammate",
    "Project", "ProjectStatus", "Visibility",
    "JoinRequest", "RatingRequest", "RequestStatus", "RequestType", "TeamMembership", "TeamRequest",
]
