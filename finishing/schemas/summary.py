"""Aggregate statistics over the logged sessions."""

from pydantic import BaseModel, Field


class SessionSummary(BaseModel):
    """Totals and averages across every logged session."""

    total_shots: int = Field(0, ge=0)
    total_goals: int = Field(0, ge=0)
    total_minutes: int = Field(0, ge=0)
    average_rpe: float = Field(
        0.0, ge=0.0, le=10.0,
        description="Mean RPE across sessions (0 when there are none)",
    )
    conversion_rate: float = Field(
        0.0, ge=0.0, le=1.0,
        description="Total goals / total shots (0 when no shots)",
    )
