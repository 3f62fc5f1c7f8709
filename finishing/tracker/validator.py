"""
Session form validation.

Turns raw form text into a list of human-readable error messages.  The
rules run in a fixed order and every failing rule contributes a message,
so the caller can show all problems at once.  An empty list means the
form can be turned into a :class:`SessionRecord` with
:func:`build_record`.
"""

from __future__ import annotations

import math
import re
from typing import Optional

from finishing.schemas.session import SessionForm, SessionRecord

# Decimal literal: optional sign, digits with optional fraction, optional exponent.
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

DATE_REQUIRED = "Date is required."
SHOTS_REQUIRED = "Shots is required."
GOALS_REQUIRED = "Goals is required."
DURATION_REQUIRED = "Duration is required."
RPE_REQUIRED = "RPE is required."
SHOTS_INVALID = "Shots must be an integer ≥ 1."
GOALS_INVALID = "Goals must be an integer ≥ 0."
GOALS_EXCEED_SHOTS = "Goals must be ≤ shots."
DURATION_INVALID = "Duration must be an integer ≥ 1 (minutes)."
RPE_INVALID = "RPE must be an integer between 1 and 10."


# ======================================================================
# Parsing
# ======================================================================


def _supplied(text: str) -> bool:
    return text.strip() != ""


def parse_integer(text: str) -> Optional[int]:
    """Parse *text* as a whole number.

    Accepts any finite decimal literal without a fractional part
    (``"12"``, ``" 12 "``, ``"12.0"``, ``"1e1"``).  Returns ``None`` for
    empty, non-numeric, non-finite or fractional input.
    """
    stripped = text.strip()
    if not _NUMBER_RE.fullmatch(stripped):
        return None
    value = float(stripped)
    if not math.isfinite(value) or not value.is_integer():
        return None
    return int(value)


# ======================================================================
# Validation
# ======================================================================


def validate(form: SessionForm) -> list[str]:
    """Return every validation error for *form*, in rule order."""
    errors: list[str] = []

    if not _supplied(form.date):
        errors.append(DATE_REQUIRED)
    if not _supplied(form.shots):
        errors.append(SHOTS_REQUIRED)
    if not _supplied(form.goals):
        errors.append(GOALS_REQUIRED)
    if not _supplied(form.duration_min):
        errors.append(DURATION_REQUIRED)
    if not _supplied(form.rpe):
        errors.append(RPE_REQUIRED)

    shots = parse_integer(form.shots)
    goals = parse_integer(form.goals)
    duration = parse_integer(form.duration_min)
    rpe = parse_integer(form.rpe)

    if _supplied(form.shots) and (shots is None or shots < 1):
        errors.append(SHOTS_INVALID)
    if _supplied(form.goals) and (goals is None or goals < 0):
        errors.append(GOALS_INVALID)
    if shots is not None and goals is not None and goals > shots:
        errors.append(GOALS_EXCEED_SHOTS)

    if _supplied(form.duration_min) and (duration is None or duration < 1):
        errors.append(DURATION_INVALID)

    if _supplied(form.rpe) and (rpe is None or not 1 <= rpe <= 10):
        errors.append(RPE_INVALID)

    return errors


def build_record(form: SessionForm, record_id: str, created_at: int) -> SessionRecord:
    """Build a record from a form that passed :func:`validate`.

    Raises:
        ValueError: if the form does not hold valid integers.
    """
    counts = {
        "shots": parse_integer(form.shots),
        "goals": parse_integer(form.goals),
        "duration_min": parse_integer(form.duration_min),
        "rpe": parse_integer(form.rpe),
    }
    missing = [name for name, value in counts.items() if value is None]
    if missing:
        raise ValueError(f"Form has not been validated: {', '.join(missing)} not an integer")

    return SessionRecord(
        id=record_id,
        date=form.date.strip(),
        foot=form.foot,
        notes=form.notes.strip(),
        created_at=created_at,
        **counts,
    )
