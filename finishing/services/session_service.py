"""
Session tracker service.

Owns the canonical in-memory session collection.  The collection is read
from the :class:`SessionStore` once, at startup (:meth:`load`); after that
every mutation is persisted immediately, one operation at a time, and
only then applied in memory.  A failed write raises and leaves the
collection, form and errors as they were.  The summary and the next-session advice are
recomputed from the current collection on every read.

Presentation layers hold on to one service instance, call the mutators
and render the read accessors.  Nothing here depends on a UI framework.
"""

import datetime
import uuid
from typing import Callable, Optional

from finishing.core.events import (SESSION_ADDED, SESSION_REMOVED, SESSIONS_CLEARED, VALIDATION_ERROR, EventSink,
                                   loguru_event_sink, )
from finishing.db.repositories.session_store import SessionStore, now_ms
from finishing.schemas.advisor import Advice, AdvisorConfig
from finishing.schemas.session import SessionForm, SessionRecord
from finishing.schemas.summary import SessionSummary
from finishing.tracker.advisor import compute_advice
from finishing.tracker.aggregator import summarize
from finishing.tracker.validator import build_record, validate


class TrackerNotReadyError(RuntimeError):
    """A mutation was attempted before the stored sessions were loaded."""


def _new_id() -> str:
    return uuid.uuid4().hex


class SessionTrackerService:
    """Service for session logging business logic."""

    def __init__(self, store: SessionStore, event_sink: Optional[EventSink] = None,
                 clock: Callable[[], int] = now_ms, id_factory: Callable[[], str] = _new_id,
                 today: Callable[[], datetime.date] = datetime.date.today,
                 advisor_config: Optional[AdvisorConfig] = None, ):
        self.store = store
        self.event_sink = event_sink or loguru_event_sink
        self.clock = clock
        self.id_factory = id_factory
        self.today = today
        self.advisor_config = advisor_config

        self._sessions: list[SessionRecord] = []
        self._form = SessionForm()
        self._errors: list[str] = []
        self._ready = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Read the stored sessions and accept mutations from now on."""
        self._sessions = self.store.load()
        if not self._form.date.strip():
            self._form = self._form.model_copy(update={"date": self.today().isoformat()})
        self._ready = True

    def close(self) -> None:
        """Release the storage backend.  The tracker must not be used afterwards."""
        self.store.close()
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_session(self, form: SessionForm) -> list[str]:
        """Validate *form* and, if it is valid, log it as a new session.

        Returns:
            The validation errors; empty when the session was added.
        """
        self._require_ready()

        errors = validate(form)
        if errors:
            self._errors = errors
            self._form = form
            self.event_sink(VALIDATION_ERROR, {"errors": list(errors), "form": form.model_dump()})
            return list(errors)

        record = build_record(form, record_id=self._unique_id(), created_at=self._next_created_at())
        sessions = [record, *self._sessions]
        self.store.save(sessions)
        self._sessions = sessions

        self._errors = []
        self._form = form.cleared()
        self.event_sink(SESSION_ADDED, record.to_wire())
        return []

    def remove_session(self, session_id: str) -> None:
        """Remove the session with *session_id*; unknown ids are ignored."""
        self._require_ready()

        sessions = [s for s in self._sessions if s.id != session_id]
        self.store.save(sessions)
        self._sessions = sessions
        self.event_sink(SESSION_REMOVED, {"id": session_id})

    def clear_all(self) -> None:
        """Drop every session and erase the stored collection."""
        self._require_ready()

        self.store.clear()
        self._sessions = []
        self._errors = []
        self.event_sink(SESSIONS_CLEARED, {})

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def sessions(self) -> tuple[SessionRecord, ...]:
        """Sessions, newest first."""
        return tuple(self._sessions)

    @property
    def summary(self) -> SessionSummary:
        return summarize(self._sessions)

    @property
    def advice(self) -> Advice:
        return compute_advice(self._sessions, self.advisor_config)

    @property
    def suggestion(self) -> str:
        return self.advice.summary

    @property
    def form(self) -> SessionForm:
        """Form state to show for the next entry."""
        return self._form

    @property
    def errors(self) -> list[str]:
        """Errors from the last rejected add (empty after a success)."""
        return list(self._errors)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_ready(self) -> None:
        if not self._ready:
            raise TrackerNotReadyError("Stored sessions have not been loaded yet; call load() first")

    def _next_created_at(self) -> int:
        # Strictly newer than the current newest record, even within one clock tick.
        now = self.clock()
        if self._sessions and now <= self._sessions[0].created_at:
            return self._sessions[0].created_at + 1
        return now

    def _unique_id(self) -> str:
        existing = {s.id for s in self._sessions}
        record_id = self.id_factory()
        while record_id in existing:
            record_id = self.id_factory()
        return record_id
