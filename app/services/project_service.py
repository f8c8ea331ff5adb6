"""
Project Service - create, list, look up and complete projects.

Completing a project is the only mutation after creation: status moves
ACTIVE -> COMPLETED (never back) and the rating fan-out runs in the same
transaction, so either both happen or neither does.
"""

import logging
from typing import Any, List, Optional

from app.core.errors import ForbiddenError, InvalidArgumentError, NotFoundError
from app.db.database import get_db_session
from app.models.project import Project, ProjectStatus, Visibility, normalize_list
from app.services.store_service import ProjectStore, TeamMembershipStore
from app.services.team_service import SessionFactory, TeamService, get_team_service, normalize_email

logger = logging.getLogger(__name__)


class ProjectService:

    def __init__(self, session_factory: SessionFactory = get_db_session, team_service: Optional[TeamService] = None):
        self.session_factory = session_factory
        self.team_service = team_service or get_team_service()

    def create_project(
        self,
        owner_email: str,
        title: str,
        project_type: str,
        visibility: str,
        required_skills: Any,
        preferred_technologies: Any = None,
        domain: Any = None,
        github_repo: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Project:
        """Create a project owned by `owner_email`. List fields accept a list or a comma-separated string."""
        if not (title or "").strip() or not (project_type or "").strip() or not (visibility or "").strip() \
                or required_skills is None:
            raise InvalidArgumentError("Missing required fields")
        try:
            visibility = Visibility(visibility.strip().lower()).value
        except ValueError:
            raise InvalidArgumentError("Visibility must be 'public' or 'private'")

        with self.session_factory() as db:
            project = ProjectStore(db).insert(
                owner_email=normalize_email(owner_email),
                title=title.strip(),
                project_type=project_type.strip(),
                visibility=visibility,
                required_skills=normalize_list(required_skills),
                preferred_technologies=normalize_list(preferred_technologies),
                domain=normalize_list(domain),
                description=description or "",
                github_repo=github_repo or "",
            )
        logger.info("Project %s created by %s", project.project_id, project.owner_email)
        return project

    def list_projects_for_user(self, email: str) -> List[Project]:
        """Projects the user owns, then projects they joined as a teammate."""
        with self.session_factory() as db:
            projects = ProjectStore(db)
            result = projects.list_by_owner(normalize_email(email))
            seen = {p.project_id for p in result}

            joined_ids = []
            for membership in TeamMembershipStore(db).list_for_member(email):
                if membership.project_id not in seen:
                    seen.add(membership.project_id)
                    joined_ids.append(membership.project_id)
            result.extend(projects.list_by_ids(joined_ids))
        return result

    def list_all_projects(self) -> List[Project]:
        with self.session_factory() as db:
            return ProjectStore(db).list_all()

    def get_project(self, project_id: int) -> Project:
        with self.session_factory() as db:
            project = ProjectStore(db).get(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        return project

    def complete_project(self, project_id: int, caller_email: str) -> Project:
        """Mark the project COMPLETED (owner only) and fan out rating requests."""
        with self.session_factory() as db:
            projects = ProjectStore(db)
            project = projects.get(project_id)
            if project is None:
                raise NotFoundError("Project not found")
            if normalize_email(caller_email) != normalize_email(project.owner_email):
                raise ForbiddenError("Only project owner can mark as completed")

            if not project.is_completed:
                projects.set_status(project_id, ProjectStatus.completed)
                project = projects.get(project_id)
            self.team_service.create_rating_requests(db, project)
        return project


_project_service: Optional[ProjectService] = None


def get_project_service() -> ProjectService:
    """Get or create the shared ProjectService (singleton pattern)"""
    global _project_service
    if _project_service is None:
        _project_service = ProjectService()
    return _project_service
