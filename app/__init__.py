"""
Converge - team matching backend.
Projects, team invitations and post-completion peer rating requests.

Architecture:
- FastAPI: HTTP routes under /api
- SQL database (PostgreSQL, SQLite for tests): projects, teams, requests, profiles
- TeamService: the single authority over invitations and membership
"""

__version__ = "1.0.0"
