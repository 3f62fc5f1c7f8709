"""Database repositories."""

from finishing.db.repositories.kv_entry import KeyValueRepository
from finishing.db.repositories.session_store import SessionStore

__all__ = [
    "KeyValueRepository",
    "SessionStore",
]
