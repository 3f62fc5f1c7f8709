"""Business logic services."""

from finishing.services.session_service import SessionTrackerService, TrackerNotReadyError

__all__ = [
    "SessionTrackerService",
    "TrackerNotReadyError",
]
