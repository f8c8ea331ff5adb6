"""
Store Service - SQL access for the four tables the team workflow touches.

Tables:
1. projects              - project records, owned by owner_email
2. project_team          - confirmed (project, member) pairs
3. project_team_request  - pending join invitations and rating prompts
4. profiles              - resume-derived profile per email

Every store is bound to one SQLAlchemy session, so several stores used
inside one `get_db_session()` block share a single transaction.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.models.profile import Profile
from app.models.project import Project, ProjectStatus, join_csv
from app.models.team import (
    SYSTEM_REQUESTER, JoinRequest, RatingRequest, RequestStatus, RequestType,
    TeamMembership, request_from_row
)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _one(result) -> Optional[dict]:
    row = result.mappings().fetchone()
    return dict(row) if row else None


def _all(result) -> List[dict]:
    return [dict(row) for row in result.mappings().fetchall()]


# ============================================================
# PROJECTS
# ============================================================

class ProjectStore:
    """
    Project records. List fields go in and out as lists; the comma-separated
    text form never leaves this class.
    """

    def __init__(self, db: Session):
        self.db = db

    def insert(
        self,
        owner_email: str,
        title: str,
        project_type: str,
        visibility: str,
        required_skills: List[str],
        preferred_technologies: List[str] = None,
        domain: List[str] = None,
        description: str = "",
        github_repo: str = "",
    ) -> Project:
        created_at = now_iso()
        result = self.db.execute(
            text("""
                INSERT INTO projects (title, project_type, visibility, required_skills, preferred_technologies,
                    domain, description, github_repo, owner_email, created_at, status)
                VALUES (:title, :project_type, :visibility, :required_skills, :preferred_technologies,
                    :domain, :description, :github_repo, :owner_email, :created_at, :status)
                RETURNING project_id
            """),
            {
                "title": title, "project_type": project_type, "visibility": visibility,
                "required_skills": join_csv(required_skills),
                "preferred_technologies": join_csv(preferred_technologies),
                "domain": join_csv(domain),
                "description": description, "github_repo": github_repo,
                "owner_email": owner_email, "created_at": created_at,
                "status": ProjectStatus.active.value
            }
        )
        project_id = result.scalar_one()
        return self.get(project_id)

    def get(self, project_id: int) -> Optional[Project]:
        row = _one(self.db.execute(
            text("SELECT * FROM projects WHERE project_id = :pid"),
            {"pid": project_id}
        ))
        return Project.from_row(row) if row else None

    def list_by_owner(self, owner_email: str) -> List[Project]:
        rows = _all(self.db.execute(
            text("SELECT * FROM projects WHERE owner_email = :email ORDER BY project_id"),
            {"email": owner_email}
        ))
        return [Project.from_row(r) for r in rows]

    def list_by_ids(self, project_ids: List[int]) -> List[Project]:
        projects = []
        for pid in project_ids:
            project = self.get(pid)
            if project:
                projects.append(project)
        return projects

    def list_all(self) -> List[Project]:
        rows = _all(self.db.execute(text("SELECT * FROM projects ORDER BY project_id")))
        return [Project.from_row(r) for r in rows]

    def set_status(self, project_id: int, status: ProjectStatus) -> None:
        self.db.execute(
            text("UPDATE projects SET status = :status WHERE project_id = :pid"),
            {"status": status.value, "pid": project_id}
        )


# ============================================================
# TEAM MEMBERSHIPS
# ============================================================

class TeamMembershipStore:
    """Confirmed members. (project_id, member_email) is unique in the schema."""

    def __init__(self, db: Session):
        self.db = db

    def exists(self, project_id: int, member_email: str) -> bool:
        result = self.db.execute(
            text("""
                SELECT 1 FROM project_team
                WHERE project_id = :pid AND LOWER(member_email) = LOWER(:email)
            """),
            {"pid": project_id, "email": member_email}
        )
        return result.fetchone() is not None

    def insert(self, project_id: int, member_email: str) -> TeamMembership:
        added_at = now_iso()
        result = self.db.execute(
            text("""
                INSERT INTO project_team (project_id, member_email, added_at)
                VALUES (:pid, :email, :added_at)
                RETURNING team_id
            """),
            {"pid": project_id, "email": member_email, "added_at": added_at}
        )
        return TeamMembership(
            team_id=result.scalar_one(), project_id=project_id,
            member_email=member_email, added_at=added_at
        )

    def list_for_project(self, project_id: int) -> List[TeamMembership]:
        rows = _all(self.db.execute(
            text("SELECT * FROM project_team WHERE project_id = :pid ORDER BY team_id"),
            {"pid": project_id}
        ))
        return [TeamMembership(**r) for r in rows]

    def list_for_member(self, member_email: str) -> List[TeamMembership]:
        rows = _all(self.db.execute(
            text("SELECT * FROM project_team WHERE LOWER(member_email) = LOWER(:email) ORDER BY team_id"),
            {"email": member_email}
        ))
        return [TeamMembership(**r) for r in rows]


# ============================================================
# TEAM REQUESTS
# ============================================================

class TeamRequestStore:
    """
    Join invitations and rating prompts.
    Rows are deleted once acted upon, so the table only holds work still to do.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, request_id: int) -> Optional[Union[JoinRequest, RatingRequest]]:
        row = _one(self.db.execute(
            text("SELECT * FROM project_team_request WHERE request_id = :rid"),
            {"rid": request_id}
        ))
        return request_from_row(row) if row else None

    def find_pending_join(self, project_id: int, target_email: str) -> Optional[JoinRequest]:
        row = _one(self.db.execute(
            text("""
                SELECT * FROM project_team_request
                WHERE project_id = :pid AND target_email = :email
                  AND status = :status AND type = :type
            """),
            {
                "pid": project_id, "email": target_email,
                "status": RequestStatus.pending.value, "type": RequestType.join_request.value
            }
        ))
        return request_from_row(row) if row else None

    def insert_join(self, project: Project, requester_email: str, target_email: str) -> JoinRequest:
        return self._insert(
            project, requester_email, target_email, RequestType.join_request, None, None
        )

    def insert_rating(self, project: Project, rater_email: str, ratee_email: str, ratee_name: str) -> RatingRequest:
        return self._insert(
            project, SYSTEM_REQUESTER, rater_email, RequestType.rating_request, ratee_email, ratee_name
        )

    def _insert(self, project, requester_email, target_email, request_type, ratee_email, ratee_name):
        ts = now_iso()
        params = {
            "pid": project.project_id, "title": project.title,
            "requester": requester_email, "target": target_email,
            "status": RequestStatus.pending.value, "type": request_type.value,
            "ratee_email": ratee_email, "ratee_name": ratee_name,
            "created_at": ts, "updated_at": ts
        }
        result = self.db.execute(
            text("""
                INSERT INTO project_team_request (project_id, project_title, requester_email, target_email,
                    status, type, ratee_email, ratee_name, created_at, updated_at)
                VALUES (:pid, :title, :requester, :target, :status, :type, :ratee_email, :ratee_name,
                    :created_at, :updated_at)
                RETURNING request_id
            """),
            params
        )
        return request_from_row({
            "request_id": result.scalar_one(), "project_id": project.project_id,
            "project_title": project.title, "requester_email": requester_email,
            "target_email": target_email, "status": params["status"], "type": params["type"],
            "ratee_email": ratee_email, "ratee_name": ratee_name,
            "created_at": ts, "updated_at": ts
        })

    def pending_rating_exists(self, project_id: int, rater_email: str, ratee_email: str) -> bool:
        result = self.db.execute(
            text("""
                SELECT 1 FROM project_team_request
                WHERE project_id = :pid AND target_email = :rater AND ratee_email = :ratee
                  AND status = :status AND type = :type
            """),
            {
                "pid": project_id, "rater": rater_email, "ratee": ratee_email,
                "status": RequestStatus.pending.value, "type": RequestType.rating_request.value
            }
        )
        return result.fetchone() is not None

    def delete(self, request_id: int, only_if_pending: bool = False) -> bool:
        """Delete a request. Returns False when no row matched (already gone, or no longer pending)."""
        sql = "DELETE FROM project_team_request WHERE request_id = :rid"
        params: Dict[str, object] = {"rid": request_id}
        if only_if_pending:
            sql += " AND status = :status"
            params["status"] = RequestStatus.pending.value
        result = self.db.execute(text(sql), params)
        return result.rowcount == 1

    def list_for_target(self, target_email: str) -> List[Union[JoinRequest, RatingRequest]]:
        rows = _all(self.db.execute(
            text("""
                SELECT * FROM project_team_request
                WHERE LOWER(target_email) = LOWER(:email)
                ORDER BY request_id
            """),
            {"email": target_email}
        ))
        return [request_from_row(r) for r in rows]

    def list_for_project(self, project_id: int) -> List[Union[JoinRequest, RatingRequest]]:
        rows = _all(self.db.execute(
            text("SELECT * FROM project_team_request WHERE project_id = :pid ORDER BY request_id"),
            {"pid": project_id}
        ))
        return [request_from_row(r) for r in rows]


# ============================================================
# PROFILES
# ============================================================

class ProfileStore:
    """Profile lookup by email. A missing profile means the user never registered one."""

    FIELDS = ("name", "year", "department", "institution", "availability")

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[Profile]:
        row = _one(self.db.execute(
            text("SELECT * FROM profiles WHERE LOWER(email) = LOWER(:email)"),
            {"email": email}
        ))
        return Profile(**row) if row else None

    def upsert(self, email: str, fields: Dict[str, Optional[str]]) -> Profile:
        """Create the profile or update only the provided fields."""
        ts = now_iso()
        values = {k: v for k, v in fields.items() if k in self.FIELDS and v is not None}
        existing = self.find_by_email(email)
        if existing is None:
            params = {f: values.get(f) for f in self.FIELDS}
            params.update({"email": email, "created_at": ts, "updated_at": ts})
            self.db.execute(
                text("""
                    INSERT INTO profiles (email, name, year, department, institution, availability,
                        created_at, updated_at)
                    VALUES (:email, :name, :year, :department, :institution, :availability,
                        :created_at, :updated_at)
                """),
                params
            )
        elif values:
            updates = [f"{field} = :{field}" for field in values]
            params = dict(values, pid=existing.profile_id, updated_at=ts)
            self.db.execute(
                text(f"UPDATE profiles SET {', '.join(updates)}, updated_at = :updated_at WHERE profile_id = :pid"),
                params
            )
        return self.find_by_email(email)
