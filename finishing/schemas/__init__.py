"""Pydantic schemas for session records, form input and analytics."""

from finishing.schemas.session import Foot, SessionForm, SessionRecord
from finishing.schemas.summary import SessionSummary
from finishing.schemas.advisor import Advice, AdvisorConfig

__all__ = [
    "Foot",
    "SessionForm",
    "SessionRecord",
    "SessionSummary",
    "Advice",
    "AdvisorConfig",
]
