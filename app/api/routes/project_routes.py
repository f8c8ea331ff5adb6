"""
Project Routes

POST /projects - Create project (caller becomes owner)
GET /projects - My projects (owned, then joined)
GET /projects/explore - All projects
GET /projects/{project_id} - Project details with teammates
POST /projects/{project_id}/complete - Mark completed (owner only), triggers rating requests
"""

from typing import List

from fastapi import APIRouter, Depends

from app.core.auth import get_current_user
from app.core.errors import parse_id
from app.services.project_service import ProjectService, get_project_service
from app.services.team_service import TeamService, get_team_service
from app.schemas.schemas import (
    ProjectCreate, ProjectResponse, CompleteProjectResponse, ErrorResponse
)

router = APIRouter(prefix="/projects", tags=["Projects"])

ERRORS = {code: {"model": ErrorResponse} for code in (400, 401, 403, 404)}


@router.post("", response_model=ProjectResponse, status_code=201, responses=ERRORS)
async def create_project(
    data: ProjectCreate,
    user: dict = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    """
    Create a project. title, type, visibility and requiredSkills are required.

    List fields (requiredSkills, preferredTechnologies, domain) accept a JSON
    array or a comma-separated string.
    """
    project = projects.create_project(
        owner_email=user["email"],
        title=data.title,
        project_type=data.project_type,
        visibility=data.visibility,
        required_skills=data.required_skills,
        preferred_technologies=data.preferred_technologies,
        domain=data.domain,
        github_repo=data.github_repo,
        description=data.description,
    )
    return ProjectResponse.from_project(project)


@router.get("", response_model=List[ProjectResponse])
async def list_my_projects(
    user: dict = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    """Projects the caller owns, followed by projects they joined."""
    return [
        ProjectResponse.from_project(p, posted_by=True)
        for p in projects.list_projects_for_user(user["email"])
    ]


@router.get("/explore", response_model=List[ProjectResponse])
async def explore_projects(projects: ProjectService = Depends(get_project_service)):
    """Every project in the system (public feed)."""
    return [ProjectResponse.from_project(p, posted_by=True) for p in projects.list_all_projects()]


@router.get("/{project_id}", response_model=ProjectResponse, responses=ERRORS)
async def get_project(
    project_id: str,
    user: dict = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
    teams: TeamService = Depends(get_team_service),
):
    """Project details including current teammates."""
    pid = parse_id(project_id, "project id")
    project = projects.get_project(pid)
    return ProjectResponse.from_project(project, teammates=teams.list_teammates(pid))


@router.post("/{project_id}/complete", response_model=CompleteProjectResponse, responses=ERRORS)
async def complete_project(
    project_id: str,
    user: dict = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    """Owner marks the project completed; every member gets rating requests."""
    pid = parse_id(project_id, "project id")
    project = projects.complete_project(pid, user["email"])
    return CompleteProjectResponse(
        message="Project marked as completed",
        project=ProjectResponse.from_project(project),
    )
