"""Test configuration: point the app at an in-memory SQLite database.

The environment must be set before anything under ``app`` is imported, because
settings and the engine are created at import time.
"""

import os
import sys

ROOT_DIR = os.path.abspath(os.path.dirname(__file__))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import pytest  # noqa: E402

from app.db.database import engine, get_db_session  # noqa: E402
from app.db.tables import metadata  # noqa: E402
from app.services.project_service import ProjectService  # noqa: E402
from app.services.store_service import ProfileStore  # noqa: E402
from app.services.team_service import TeamService  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_db():
    metadata.drop_all(engine)
    metadata.create_all(engine)
    yield


@pytest.fixture
def teams():
    return TeamService()


@pytest.fixture
def projects(teams):
    return ProjectService(team_service=teams)


@pytest.fixture
def make_profile():
    def _make(email, name=None, **fields):
        with get_db_session() as db:
            return ProfileStore(db).upsert(email, dict(fields, name=name or email.split("@")[0]))
    return _make


@pytest.fixture
def make_project(projects):
    def _make(owner="o@x.com", title="Converge", skills="Python,SQL"):
        return projects.create_project(
            owner_email=owner, title=title, project_type="Software", visibility="public",
            required_skills=skills,
        )
    return _make
