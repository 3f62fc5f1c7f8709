"""
Database session management.

Provides the SQLModel engine used by the SQL persistence port.
"""

from sqlalchemy.engine import Engine
from sqlmodel import create_engine

from finishing.core.config import settings


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections may be shared across threads."""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, echo=echo, connect_args=connect_args)


# Create database engine
engine = build_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # Log SQL queries in debug mode
)
