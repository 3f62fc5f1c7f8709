"""
Key-value entry repository.

Handles database operations for :class:`KeyValueEntry`.
"""

from typing import Optional

from sqlmodel import Session

from finishing.models.kv_entry import KeyValueEntry, utcnow


class KeyValueRepository:
    """Repository for KeyValueEntry database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_key(self, key: str) -> Optional[KeyValueEntry]:
        return self.session.get(KeyValueEntry, key)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def upsert(self, key: str, value: str) -> KeyValueEntry:
        entry = self.get_by_key(key)
        if entry is None:
            entry = KeyValueEntry(key=key, value=value)
        else:
            entry.value = value
            entry.updated_at = utcnow()
        self.session.add(entry)
        self._commit()
        self.session.refresh(entry)
        return entry

    def delete(self, key: str) -> bool:
        entry = self.get_by_key(key)
        if entry:
            self.session.delete(entry)
            self._commit()
            return True
        return False

    def _commit(self) -> None:
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
