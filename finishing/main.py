"""
Tracker factory.

Wires settings, logging, the configured persistence port, the session
store and the tracker service together, and loads the stored sessions.
"""

from typing import Optional

from sqlmodel import Session

from finishing.core.config import Settings, settings
from finishing.core.events import EventSink
from finishing.core.logger import setup_logger
from finishing.db.ports import FileKeyValuePort, InMemoryKeyValuePort, KeyValuePort, SqlKeyValuePort
from finishing.db.repositories.session_store import SessionStore
from finishing.services.session_service import SessionTrackerService


def build_port(config: Settings) -> KeyValuePort:
    """Create the persistence port selected by ``STORAGE_BACKEND``."""
    if config.STORAGE_BACKEND == "memory":
        return InMemoryKeyValuePort()
    if config.STORAGE_BACKEND == "file":
        return FileKeyValuePort(config.DATA_DIR)

    from finishing.db.init_db import init_db
    from finishing.db.session import build_engine

    engine = build_engine(config.DATABASE_URL, echo=config.DEBUG)
    init_db(engine)
    return SqlKeyValuePort(Session(engine), engine=engine)


def create_tracker(config: Optional[Settings] = None, port: Optional[KeyValuePort] = None,
                   event_sink: Optional[EventSink] = None, ) -> SessionTrackerService:
    """Build a ready-to-use tracker.

    Args:
        config: Settings override (defaults to the global settings).
        port: Persistence port override; built from *config* when omitted.
        event_sink: Optional event sink (defaults to loguru).

    Returns:
        A loaded :class:`SessionTrackerService`.  Call its ``close()`` when
        done so a database backend releases its connections.
    """
    config = config or settings
    setup_logger(level=config.LOG_LEVEL, log_file=config.LOG_FILE)

    store = SessionStore(port if port is not None else build_port(config), key=config.STORAGE_KEY,
                         quarantine_corrupt=config.QUARANTINE_CORRUPT, )
    tracker = SessionTrackerService(store, event_sink=event_sink)
    tracker.load()
    return tracker
