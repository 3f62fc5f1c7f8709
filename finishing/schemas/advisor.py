"""
Next-session advisor schemas.

The advisor reads the most recent session and produces a single
recommendation for the next one.
"""

from typing import Optional

from pydantic import BaseModel, Field


class AdvisorConfig(BaseModel):
    """Thresholds for the next-session heuristic.

    Kept out of the decision function so tests can inject their own.
    """

    fatigue_rpe: int = Field(8, ge=1, le=10, description="RPE at or above this triggers the fatigue guard")
    low_conversion_min_shots: int = Field(20, ge=1)
    low_conversion_below: float = Field(0.2, ge=0.0, le=1.0)
    high_conversion_min_shots: int = Field(15, ge=1)
    high_conversion_at_least: float = Field(0.6, ge=0.0, le=1.0)


class Advice(BaseModel):
    """Advisor output."""

    recommendation: str = Field(
        ...,
        description="One of: first_session, reduce_volume, simplify, increase_difficulty, add_constraint",
    )
    summary: str = Field(
        ...,
        description="Human-readable one-line suggestion",
    )
    latest_conversion: Optional[float] = Field(
        None, ge=0.0, le=1.0,
        description="Conversion of the session the advice is based on (None if no sessions)",
    )
