"""
Table definitions (SQLAlchemy Core).

Only used for DDL and constraints; queries are plain SQL in the services.
Timestamps are ISO-8601 UTC strings, multi-valued project fields are
comma-separated text.
"""

from sqlalchemy import (
    Column, ForeignKey, Index, Integer, MetaData, String, Table, Text, UniqueConstraint, text
)

metadata = MetaData()

users = Table(
    "users", metadata,
    Column("user_id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("created_at", String(40), nullable=False),
)

# Resume-derived profile, looked up by email
profiles = Table(
    "profiles", metadata,
    Column("profile_id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("name", String(200)),
    Column("year", String(50)),
    Column("department", String(200)),
    Column("institution", String(200)),
    Column("availability", String(100)),
    Column("created_at", String(40), nullable=False),
    Column("updated_at", String(40), nullable=False),
)

projects = Table(
    "projects", metadata,
    Column("project_id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(200), nullable=False),
    Column("project_type", String(100), nullable=False),
    Column("visibility", String(20), nullable=False),
    Column("required_skills", Text),
    Column("preferred_technologies", Text),
    Column("domain", Text),
    Column("description", Text),
    Column("github_repo", String(500)),
    Column("owner_email", String(255), nullable=False, index=True),
    Column("created_at", String(40), nullable=False),
    Column("status", String(20), nullable=False, server_default=text("'ACTIVE'")),
)

project_team = Table(
    "project_team", metadata,
    Column("team_id", Integer, primary_key=True, autoincrement=True),
    Column("project_id", Integer, ForeignKey("projects.project_id"), nullable=False),
    Column("member_email", String(255), nullable=False, index=True),
    Column("added_at", String(40), nullable=False),
    UniqueConstraint("project_id", "member_email", name="uq_project_team_member"),
)

project_team_request = Table(
    "project_team_request", metadata,
    Column("request_id", Integer, primary_key=True, autoincrement=True),
    Column("project_id", Integer, ForeignKey("projects.project_id"), nullable=False),
    Column("project_title", String(200)),
    Column("requester_email", String(255), nullable=False),
    Column("target_email", String(255), nullable=False, index=True),
    Column("status", String(20), nullable=False, server_default=text("'PENDING'")),
    Column("type", String(20), nullable=False, server_default=text("'JOIN_REQUEST'")),
    Column("ratee_email", String(255)),
    Column("ratee_name", String(200)),
    Column("created_at", String(40), nullable=False),
    Column("updated_at", String(40), nullable=False),
)

# At most one pending invite per (project, target)
Index(
    "uq_pending_join_request",
    project_team_request.c.project_id,
    project_team_request.c.target_email,
    unique=True,
    postgresql_where=text("status = 'PENDING' AND type = 'JOIN_REQUEST'"),
    sqlite_where=text("status = 'PENDING' AND type = 'JOIN_REQUEST'"),
)
