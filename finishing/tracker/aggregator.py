"""Summary statistics over the session collection."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from finishing.schemas.session import SessionRecord
from finishing.schemas.summary import SessionSummary


def conversion(record: SessionRecord) -> float:
    """Goals per shot for a single session (0 when no shots)."""
    return record.goals / record.shots if record.shots > 0 else 0.0


def summarize(records: Iterable[SessionRecord]) -> SessionSummary:
    """Compute totals, mean RPE and overall conversion in one pass."""
    total_shots = 0
    total_goals = 0
    total_minutes = 0
    rpe_sum = 0
    count = 0

    for record in records:
        total_shots += record.shots
        total_goals += record.goals
        total_minutes += record.duration_min
        rpe_sum += record.rpe
        count += 1

    return SessionSummary(
        total_shots=total_shots,
        total_goals=total_goals,
        total_minutes=total_minutes,
        average_rpe=rpe_sum / count if count else 0.0,
        conversion_rate=total_goals / total_shots if total_shots > 0 else 0.0,
    )


def per_session_conversion(records: Sequence[SessionRecord]) -> list[tuple[str, float]]:
    """Return ``(id, conversion)`` for each session, in collection order."""
    return [(record.id, conversion(record)) for record in records]


def format_percent(ratio: float) -> str:
    """Render a ratio as a percentage with one decimal, e.g. ``"15.0%"``."""
    if not math.isfinite(ratio):
        return "0.0%"
    return f"{ratio * 100:.1f}%"
