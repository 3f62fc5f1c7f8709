"""
Key-value persistence ports.

The session store only needs three operations on a string value
addressed by a key.  Anything implementing :class:`KeyValuePort` can
back it:

- :class:`InMemoryKeyValuePort` — dict-backed, for tests and demos
- :class:`FileKeyValuePort` — one file per key in a directory
- :class:`SqlKeyValuePort` — the ``kv_store`` table via SQLModel
"""

from __future__ import annotations

import re
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Optional, Protocol

from sqlalchemy.engine import Engine
from sqlmodel import Session

from finishing.db.repositories.kv_entry import KeyValueRepository

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class KeyValuePort(Protocol):
    """Minimal string key-value storage."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or ``None`` if the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove *key*.  Removing an absent key is a no-op."""
        ...

    def close(self) -> None:
        """Release any held resources.  The port is unusable afterwards."""
        ...


class InMemoryKeyValuePort:
    """Dict-backed port."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def close(self) -> None:
        pass


class FileKeyValuePort:
    """Stores each key as a file inside *directory*.

    Writes go to a temporary file in the same directory which then
    replaces the target, so a reader never sees a half-written value.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        return self.directory / f"{_UNSAFE_FILENAME_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self._path(key)
        with NamedTemporaryFile("w", dir=self.directory, delete=False, encoding="utf-8") as tmp:
            tmp.write(value)
            temp_path = Path(tmp.name)
        temp_path.replace(target)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def close(self) -> None:
        pass


class SqlKeyValuePort:
    """Port backed by the ``kv_store`` table.

    When *engine* is given the port owns it: :meth:`close` closes the
    session and disposes the engine.
    """

    def __init__(self, session: Session, engine: Optional[Engine] = None):
        self.session = session
        self.engine = engine
        self.repository = KeyValueRepository(session)

    def get(self, key: str) -> Optional[str]:
        entry = self.repository.get_by_key(key)
        return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        self.repository.upsert(key, value)

    def delete(self, key: str) -> None:
        self.repository.delete(key)

    def close(self) -> None:
        self.session.close()
        if self.engine is not None:
            self.engine.dispose()
