"""
Shooting session schemas.

A :class:`SessionRecord` is one logged finishing session.  Records are
immutable once created and carry their invariants as field constraints,
so every construction path (a validated form or a decoded stored value)
enforces them.

Persisted field names are camelCase (``durationMin``, ``createdAt``);
Python attributes are snake_case.  Both are accepted on input.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Foot(str, Enum):
    """Which foot (or feet) the session was shot with."""

    RIGHT = "Right"
    LEFT = "Left"
    BOTH = "Both"

    @classmethod
    def coerce(cls, value: Any) -> Foot:
        """Return the matching member, or ``RIGHT`` for anything unrecognized."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if value == member.value:
                return member
        return cls.RIGHT


class SessionRecord(BaseModel):
    """A single logged finishing session."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1, description="Opaque unique identifier")
    date: str = Field(..., min_length=1, description="Session date, YYYY-MM-DD")
    foot: Foot = Field(Foot.RIGHT)
    shots: int = Field(..., ge=1)
    goals: int = Field(..., ge=0)
    duration_min: int = Field(..., ge=1, alias="durationMin", description="Session length (minutes)")
    rpe: int = Field(..., ge=1, le=10, description="Rate of perceived exertion")
    notes: str = Field("")
    created_at: int = Field(..., alias="createdAt", description="Creation time (epoch ms), ordering only")

    @model_validator(mode="after")
    def _goals_within_shots(self) -> SessionRecord:
        if self.goals > self.shots:
            raise ValueError("goals must be <= shots")
        return self

    def to_wire(self) -> dict[str, Any]:
        """Return the persisted (camelCase, JSON-ready) representation."""
        return self.model_dump(by_alias=True, mode="json")


class SessionForm(BaseModel):
    """Raw form input.  Everything is text except ``foot``."""

    model_config = ConfigDict(populate_by_name=True)

    date: str = ""
    foot: Foot = Foot.RIGHT
    shots: str = ""
    goals: str = ""
    duration_min: str = Field("", alias="durationMin")
    rpe: str = ""
    notes: str = ""

    def cleared(self) -> SessionForm:
        """Return a copy with the per-session fields emptied.

        ``date`` and ``foot`` are kept for the next entry.
        """
        return self.model_copy(update={"shots": "", "goals": "", "duration_min": "", "rpe": "", "notes": ""})
