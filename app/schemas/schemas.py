"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
JSON field names are camelCase on the wire (requestId, projectTitle, ...).
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Union
from datetime import datetime

from app.models.profile import Profile, Teammate
from app.models.project import Project
from app.models.team import RatingRequest, TeamMembership


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)

class LoginRequest(CamelModel):
    email: EmailStr
    password: str

class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    email: str

class UserResponse(CamelModel):
    user_id: int
    email: str
    created_at: datetime


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, max_length=200)
    year: Optional[str] = None
    department: Optional[str] = None
    institution: Optional[str] = None
    availability: Optional[str] = None

class ProfileResponse(CamelModel):
    id: int
    email: str
    name: Optional[str] = None
    year: Optional[str] = None
    department: Optional[str] = None
    institution: Optional[str] = None
    availability: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileResponse":
        return cls(id=profile.profile_id, **profile.model_dump(exclude={"profile_id"}))


# ============================================================
# PROJECT SCHEMAS
# ============================================================

# Lists may arrive as JSON arrays or comma-separated strings
ListOrCsv = Optional[Union[List[str], str]]


class ProjectCreate(CamelModel):
    title: Optional[str] = None
    project_type: Optional[str] = Field(None, validation_alias=AliasChoices("type", "projectType"))
    visibility: Optional[str] = None
    required_skills: ListOrCsv = Field(
        None, validation_alias=AliasChoices("requiredSkills", "required_skills")
    )
    preferred_technologies: ListOrCsv = Field(
        None, validation_alias=AliasChoices(
            "preferredTechnologies", "preferred_technologies", "preferredSkills", "preferred_skills"
        )
    )
    domain: ListOrCsv = Field(
        None, validation_alias=AliasChoices("domain", "domains", "projectDomains", "domain_list")
    )
    github_repo: Optional[str] = Field(None, validation_alias=AliasChoices("githubRepo", "github_repo"))
    description: Optional[str] = None


class PostedBy(CamelModel):
    email: str


class TeammateResponse(CamelModel):
    id: Optional[int] = None
    email: str
    name: Optional[str] = None
    year: Optional[str] = None
    department: Optional[str] = None
    institution: Optional[str] = None
    availability: Optional[str] = None
    added_at: datetime

    @classmethod
    def from_teammate(cls, t: Teammate) -> "TeammateResponse":
        return cls(id=t.profile_id, **t.model_dump(exclude={"profile_id"}))


class ProjectResponse(CamelModel):
    id: int
    title: str
    project_type: str = Field(..., alias="type")
    visibility: str
    required_skills: List[str] = []
    preferred_technologies: List[str] = []
    github_repo: str = ""
    description: str = ""
    domain: List[str] = []
    created_at: datetime
    email: str
    status: str
    posted_by: Optional[PostedBy] = None
    teammates: Optional[List[TeammateResponse]] = None

    @classmethod
    def from_project(
        cls, p: Project, posted_by: bool = False, teammates: List[Teammate] = None
    ) -> "ProjectResponse":
        return cls(
            id=p.project_id, title=p.title, project_type=p.project_type, visibility=p.visibility.value,
            required_skills=p.required_skills, preferred_technologies=p.preferred_technologies,
            github_repo=p.github_repo, description=p.description, domain=p.domain,
            created_at=p.created_at, email=p.owner_email, status=p.status.value,
            posted_by=PostedBy(email=p.owner_email) if posted_by else None,
            teammates=[TeammateResponse.from_teammate(t) for t in teammates] if teammates is not None else None,
        )


class CompleteProjectResponse(CamelModel):
    message: str
    project: ProjectResponse


# ============================================================
# TEAM SCHEMAS
# ============================================================

class InviteRequest(CamelModel):
    email: Optional[str] = None


class TeamRequestResponse(CamelModel):
    """rateeEmail/rateeName are only set when type == RATING_REQUEST."""
    request_id: int
    project_id: int
    project_title: str = ""
    requester_email: str
    target_email: str
    status: str
    type: str
    ratee_email: Optional[str] = None
    ratee_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_request(cls, r) -> "TeamRequestResponse":
        is_rating = isinstance(r, RatingRequest)
        return cls(
            request_id=r.request_id, project_id=r.project_id, project_title=r.project_title,
            requester_email=r.requester_email, target_email=r.target_email,
            status=r.status.value, type=r.type,
            ratee_email=r.ratee_email if is_rating else None,
            ratee_name=r.ratee_name if is_rating else None,
            created_at=r.created_at, updated_at=r.updated_at,
        )


class MembershipResponse(CamelModel):
    project_id: int
    member_email: str
    added_at: datetime

    @classmethod
    def from_membership(cls, m: TeamMembership) -> "MembershipResponse":
        return cls(project_id=m.project_id, member_email=m.member_email, added_at=m.added_at)


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(CamelModel):
    message: str
    success: bool = True

class ErrorResponse(CamelModel):
    timestamp: datetime
    status: int
    error: str
    message: str
