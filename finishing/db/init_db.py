"""
Database initialization.

Creates the key-value table used by the SQL persistence port.
"""

from typing import Optional

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Initialize database schema.

    Args:
        bind: Engine to create tables on.  Defaults to the application engine.
    """
    # Import all models so SQLModel.metadata has them
    import finishing.db.base  # noqa: F401

    if bind is None:
        from finishing.db.session import engine as bind

    logger.bind(url=str(bind.url)).info("Creating database tables")
    SQLModel.metadata.create_all(bind)
    logger.info("Database initialization complete")
