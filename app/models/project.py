"""
Project model and the comma-separated storage format for its list fields.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel


class ProjectStatus(str, Enum):
    active = "ACTIVE"
    completed = "COMPLETED"


class Visibility(str, Enum):
    public = "public"
    private = "private"


class Project(BaseModel):
    project_id: int
    title: str
    project_type: str
    visibility: Visibility
    required_skills: List[str] = []
    preferred_technologies: List[str] = []
    domain: List[str] = []
    description: str = ""
    github_repo: str = ""
    owner_email: str
    created_at: datetime
    status: ProjectStatus = ProjectStatus.active

    @property
    def is_completed(self) -> bool:
        return self.status == ProjectStatus.completed

    @classmethod
    def from_row(cls, row: dict) -> "Project":
        return cls(
            project_id=row["project_id"],
            title=row["title"],
            project_type=row["project_type"],
            visibility=row["visibility"],
            required_skills=split_csv(row["required_skills"]),
            preferred_technologies=split_csv(row["preferred_technologies"]),
            domain=split_csv(row["domain"]),
            description=row["description"] or "",
            github_repo=row["github_repo"] or "",
            owner_email=row["owner_email"],
            created_at=row["created_at"],
            status=row["status"],
        )


def normalize_list(value: Any) -> List[str]:
    """
    Accept a list or a comma-separated string and return clean, ordered items.

    "[Java, Spring]" and ["Java ", "", "Spring"] both become ["Java", "Spring"].
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = [str(v) for v in value]
    else:
        s = str(value).strip()
        if s.startswith("[") and s.endswith("]"):
            s = s[1:-1]
        items = s.split(",")
    cleaned = []
    for item in items:
        item = re.sub(r"^\[|\]$", "", item.strip()).strip()
        if item:
            cleaned.append(item)
    return cleaned


def join_csv(items: Optional[List[str]]) -> str:
    return ",".join(items or [])


def split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
