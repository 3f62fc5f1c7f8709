"""
Session store — the whole collection as one JSON value in a key-value port.

Stored content is treated as untrusted.  :meth:`SessionStore.load` never
raises: a missing key, text that is not JSON, or JSON that is not a list
all read as an empty collection.  List elements are coerced field by
field the way a lenient reader of older or hand-edited data would:

    ==============  =====================================
    field           when missing or unusable
    ==============  =====================================
    ``foot``        ``Right``
    numeric fields  ``0``
    ``notes``       empty string
    ``createdAt``   the current time (epoch ms)
    ``id``/``date`` coerced to text (``None`` -> ``""``)
    ==============  =====================================

After coercion an element must still satisfy every record invariant
(non-empty ``id`` and ``date``, ``shots >= 1``, ``goals <= shots`` ...);
elements that do not are dropped and logged.  Duplicate ids keep the
most recently created record.  The result is ordered newest first.
"""

from __future__ import annotations

import json
import math
import time
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

from loguru import logger
from pydantic import ValidationError

from finishing.schemas.session import Foot, SessionRecord

if TYPE_CHECKING:
    from finishing.db.ports import KeyValuePort

QUARANTINE_SUFFIX = ".corrupt"

_NUMERIC_FIELDS = ("shots", "goals", "durationMin", "rpe")


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


# ======================================================================
# Defensive decoding
# ======================================================================


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _as_number(value: Any) -> float | int:
    """Coerce a stored numeric field; anything unusable becomes ``0``."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip()) if value.strip() else 0
        except ValueError:
            return 0
    else:
        return 0
    if isinstance(number, float):
        if not math.isfinite(number):
            return 0
        if number.is_integer():
            return int(number)
    return number


def _as_timestamp(value: Any, default: int) -> int:
    """Coerce a stored ``createdAt``; fractions are floored, anything unusable is *default*."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    return math.floor(number)


def coerce_record(raw: dict[str, Any], default_created_at: int) -> Optional[SessionRecord]:
    """Coerce one stored element into a record, or ``None`` if it cannot hold.

    Args:
        raw: Decoded JSON object.
        default_created_at: Timestamp used when ``createdAt`` is missing or unusable.
    """
    fields: dict[str, Any] = {
        "id": _as_text(raw.get("id")),
        "date": _as_text(raw.get("date")),
        "foot": Foot.coerce(raw.get("foot")),
        "notes": _as_text(raw.get("notes")),
    }
    for name in _NUMERIC_FIELDS:
        fields[name] = _as_number(raw.get(name))

    fields["createdAt"] = _as_timestamp(raw.get("createdAt"), default_created_at)

    if not fields["id"] or not fields["date"]:
        return None

    try:
        return SessionRecord.model_validate(fields)
    except ValidationError as e:
        logger.bind(record_id=fields["id"], errors=e.error_count()).warning("Dropping stored session that "
                                                                             "violates record invariants")
        return None


def sort_newest_first(records: Iterable[SessionRecord]) -> list[SessionRecord]:
    return sorted(records, key=lambda r: r.created_at, reverse=True)


def _dedupe(records: list[SessionRecord]) -> list[SessionRecord]:
    """Keep the first occurrence of each id (records are newest first)."""
    seen: set[str] = set()
    unique: list[SessionRecord] = []
    for record in records:
        if record.id in seen:
            logger.bind(record_id=record.id).warning("Dropping duplicate stored session id")
            continue
        seen.add(record.id)
        unique.append(record)
    return unique


# ======================================================================
# Store
# ======================================================================


class SessionStore:
    """Loads and saves the full session collection under one key."""

    def __init__(self, port: KeyValuePort, key: str, quarantine_corrupt: bool = True,
                 clock: Callable[[], int] = now_ms, ):
        self.port = port
        self.key = key
        self.quarantine_corrupt = quarantine_corrupt
        self.clock = clock

    @property
    def quarantine_key(self) -> str:
        return f"{self.key}{QUARANTINE_SUFFIX}"

    def load(self) -> list[SessionRecord]:
        """Read the collection, degrading to ``[]`` on any decode problem."""
        try:
            raw = self.port.get(self.key)
        except Exception:
            logger.bind(key=self.key).exception("Reading stored sessions failed")
            return []

        if not raw:
            return []

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError):
            self._quarantine(raw, reason="not valid JSON")
            return []

        if not isinstance(data, list):
            self._quarantine(raw, reason=f"expected a list, got {type(data).__name__}")
            return []

        default_created_at = self.clock()
        records = []
        for item in data:
            if not isinstance(item, dict):
                continue
            record = coerce_record(item, default_created_at)
            if record is not None:
                records.append(record)

        dropped = len(data) - len(records)
        if dropped:
            logger.bind(key=self.key, dropped=dropped, kept=len(records)).warning("Skipped unusable stored sessions")

        return _dedupe(sort_newest_first(records))

    def save(self, records: Iterable[SessionRecord]) -> None:
        """Overwrite the stored collection."""
        payload = json.dumps([record.to_wire() for record in records], ensure_ascii=False)
        self.port.set(self.key, payload)

    def clear(self) -> None:
        """Remove the stored collection entirely."""
        self.port.delete(self.key)

    def close(self) -> None:
        """Release the port's resources."""
        self.port.close()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _quarantine(self, raw: str, reason: str) -> None:
        logger.bind(key=self.key, reason=reason).warning("Stored sessions are unreadable, starting empty")
        if not self.quarantine_corrupt:
            return
        try:
            self.port.set(self.quarantine_key, raw)
        except Exception:
            logger.bind(key=self.quarantine_key).exception("Could not quarantine unreadable stored sessions")
            return
        logger.bind(key=self.quarantine_key).warning("Unreadable stored sessions copied aside")
