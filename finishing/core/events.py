"""
Diagnostic event hook for the session tracker.

The tracker reports what happened (a session was added, a form was
rejected, a session was removed, everything was cleared) to an event
sink instead of writing to a logging facility directly.  Any callable
taking ``(event, payload)`` can be injected; the default forwards to
loguru.
"""

from __future__ import annotations

from typing import Any, Callable

from loguru import logger

SESSION_ADDED = "session_added"
VALIDATION_ERROR = "validation_error"
SESSION_REMOVED = "session_removed"
SESSIONS_CLEARED = "sessions_cleared"

EventSink = Callable[[str, dict[str, Any]], None]


def loguru_event_sink(event: str, payload: dict[str, Any]) -> None:
    """Log a tracker event, binding its payload as structured context."""
    if event == VALIDATION_ERROR:
        logger.bind(event=event, **payload).warning(event)
    else:
        logger.bind(event=event, **payload).info(event)


class RecordingEventSink:
    """Event sink that keeps every event in memory, in emission order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, event: str, payload: dict[str, Any]) -> None:
        self.events.append((event, payload))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]
