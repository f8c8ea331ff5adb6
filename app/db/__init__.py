"""
Database module - SQLAlchemy engine, sessions and table metadata.
"""
from app.db.database import engine, get_db_session, init_db, test_db_connection
from app.db.tables import metadata

__all__ = [
    "engine",
    "get_db_session",
    "init_db",
    "metadata",
    "test_db_connection"
]
