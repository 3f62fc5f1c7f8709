"""
Unit tests for the session tracker service.

The service runs against an in-memory port with a fake clock, id
factory and event sink so every outcome is deterministic.
"""

import datetime
import itertools
import json

import pytest

from finishing.core.events import (
    SESSION_ADDED,
    SESSION_REMOVED,
    SESSIONS_CLEARED,
    VALIDATION_ERROR,
    RecordingEventSink,
)
from finishing.db.ports import InMemoryKeyValuePort
from finishing.db.repositories.session_store import SessionStore
from finishing.schemas.session import Foot, SessionForm
from finishing.services.session_service import SessionTrackerService, TrackerNotReadyError
from finishing.tracker.advisor import FIRST_SESSION, INCREASE_DIFFICULTY, REDUCE_VOLUME, SIMPLIFY, message_for
from finishing.tracker.validator import GOALS_EXCEED_SHOTS

KEY = "finishing_demo_v1"


# ======================================================================
# Helpers
# ======================================================================


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1_000) -> None:
        self.now += ms


def _make_form(**overrides) -> SessionForm:
    fields = {
        "date": "2024-01-01",
        "foot": Foot.LEFT,
        "shots": "20",
        "goals": "3",
        "duration_min": "30",
        "rpe": "5",
        "notes": "corners",
    }
    fields.update(overrides)
    return SessionForm(**fields)


def _make_tracker(port=None, clock=None, load=True):
    port = port if port is not None else InMemoryKeyValuePort()
    clock = clock or FakeClock()
    ids = (f"id-{n}" for n in itertools.count(1))
    events = RecordingEventSink()
    tracker = SessionTrackerService(SessionStore(port, key=KEY, clock=clock), event_sink=events, clock=clock,
                                    id_factory=lambda: next(ids), today=lambda: datetime.date(2026, 10, 19), )
    if load:
        tracker.load()
    return tracker, port, clock, events


def _stored_ids(port) -> list[str]:
    return [item["id"] for item in json.loads(port.get(KEY))]


# ======================================================================
# load
# ======================================================================


class TestLoad:
    """Startup behaviour."""

    def test_not_ready_before_load(self):
        tracker, _, _, _ = _make_tracker(load=False)
        assert tracker.is_ready is False

    @pytest.mark.parametrize("mutate", [
        lambda t: t.add_session(_make_form()),
        lambda t: t.remove_session("x"),
        lambda t: t.clear_all(),
    ])
    def test_mutations_before_load_are_rejected(self, mutate):
        tracker, port, _, _ = _make_tracker(load=False)
        with pytest.raises(TrackerNotReadyError):
            mutate(tracker)
        assert port.get(KEY) is None

    def test_load_reads_existing_sessions_newest_first(self):
        port = InMemoryKeyValuePort()
        port.set(KEY, json.dumps([
            {"id": "old", "date": "2024-01-01", "foot": "Right", "shots": 10, "goals": 2, "durationMin": 20,
             "rpe": 4, "notes": "", "createdAt": 10},
            {"id": "new", "date": "2024-01-02", "foot": "Both", "shots": 12, "goals": 6, "durationMin": 25,
             "rpe": 6, "notes": "", "createdAt": 20},
        ]))
        tracker, _, _, _ = _make_tracker(port=port)
        assert [s.id for s in tracker.sessions] == ["new", "old"]

    def test_load_with_corrupt_content_starts_empty(self):
        port = InMemoryKeyValuePort({KEY: "not json"})
        tracker, _, _, _ = _make_tracker(port=port)
        assert tracker.sessions == ()
        assert tracker.is_ready is True

    def test_load_prefills_today_as_form_date(self):
        tracker, _, _, _ = _make_tracker()
        assert tracker.form.date == "2026-10-19"
        assert tracker.form.foot is Foot.RIGHT


# ======================================================================
# add_session
# ======================================================================


class TestAddSession:
    """Adding a session."""

    def test_valid_form_adds_and_persists(self):
        tracker, port, clock, _ = _make_tracker()
        errors = tracker.add_session(_make_form())

        assert errors == []
        assert len(tracker.sessions) == 1
        record = tracker.sessions[0]
        assert record.id == "id-1"
        assert record.created_at == clock.now
        assert record.foot is Foot.LEFT
        assert (record.shots, record.goals, record.duration_min, record.rpe) == (20, 3, 30, 5)
        assert _stored_ids(port) == ["id-1"]

    def test_new_session_is_first(self):
        tracker, port, clock, _ = _make_tracker()
        tracker.add_session(_make_form())
        clock.advance()
        tracker.add_session(_make_form(shots="15", goals="10"))

        assert [s.id for s in tracker.sessions] == ["id-2", "id-1"]
        assert _stored_ids(port) == ["id-2", "id-1"]

    def test_same_clock_tick_still_orders_newest_first(self):
        tracker, _, _, _ = _make_tracker()
        for _ in range(3):
            tracker.add_session(_make_form())

        created = [s.created_at for s in tracker.sessions]
        assert created == sorted(created, reverse=True)
        assert len(set(created)) == 3

    def test_ids_are_unique_even_if_factory_repeats(self):
        ids = iter(["dup", "dup", "fresh"])
        store = SessionStore(InMemoryKeyValuePort(), key=KEY)
        tracker = SessionTrackerService(store, event_sink=RecordingEventSink(), id_factory=lambda: next(ids))
        tracker.load()
        tracker.add_session(_make_form())
        tracker.add_session(_make_form())
        assert [s.id for s in tracker.sessions] == ["fresh", "dup"]

    def test_success_clears_per_session_fields_only(self):
        tracker, _, _, _ = _make_tracker()
        tracker.add_session(_make_form(date="2024-03-03", foot=Foot.BOTH))

        form = tracker.form
        assert form.date == "2024-03-03"
        assert form.foot is Foot.BOTH
        assert (form.shots, form.goals, form.duration_min, form.rpe, form.notes) == ("", "", "", "", "")

    def test_invalid_form_returns_errors_without_state_change(self):
        tracker, port, _, _ = _make_tracker()
        tracker.add_session(_make_form())
        before = port.get(KEY)

        errors = tracker.add_session(_make_form(shots="10", goals="15"))

        assert errors == [GOALS_EXCEED_SHOTS]
        assert tracker.errors == [GOALS_EXCEED_SHOTS]
        assert len(tracker.sessions) == 1
        assert port.get(KEY) == before

    def test_invalid_form_keeps_the_entered_values(self):
        tracker, _, _, _ = _make_tracker()
        tracker.add_session(_make_form(shots="", notes="keep me"))
        assert tracker.form.notes == "keep me"

    def test_success_clears_previous_errors(self):
        tracker, _, _, _ = _make_tracker()
        tracker.add_session(_make_form(rpe=""))
        assert tracker.errors
        tracker.add_session(_make_form())
        assert tracker.errors == []

    def test_events(self):
        tracker, _, _, events = _make_tracker()
        tracker.add_session(_make_form(rpe="99"))
        tracker.add_session(_make_form())

        assert events.names() == [VALIDATION_ERROR, SESSION_ADDED]
        _, failure = events.events[0]
        assert failure["errors"] == ["RPE must be an integer between 1 and 10."]
        _, added = events.events[1]
        assert added["id"] == "id-1"
        assert added["durationMin"] == 30


# ======================================================================
# remove_session / clear_all
# ======================================================================


class TestRemoveAndClear:
    """Removing sessions."""

    def test_remove_by_id(self):
        tracker, port, clock, events = _make_tracker()
        tracker.add_session(_make_form())
        clock.advance()
        tracker.add_session(_make_form())

        tracker.remove_session("id-1")

        assert [s.id for s in tracker.sessions] == ["id-2"]
        assert _stored_ids(port) == ["id-2"]
        assert events.events[-1] == (SESSION_REMOVED, {"id": "id-1"})

    def test_remove_unknown_id_is_noop(self):
        tracker, port, _, _ = _make_tracker()
        tracker.add_session(_make_form())
        tracker.remove_session("nope")
        assert [s.id for s in tracker.sessions] == ["id-1"]
        assert _stored_ids(port) == ["id-1"]

    def test_clear_all_erases_storage(self):
        tracker, port, _, events = _make_tracker()
        tracker.add_session(_make_form())
        tracker.add_session(_make_form(goals="x"))

        tracker.clear_all()

        assert tracker.sessions == ()
        assert tracker.errors == []
        assert port.get(KEY) is None
        assert events.names()[-1] == SESSIONS_CLEARED

    def test_clear_all_when_empty_is_noop(self):
        tracker, port, _, _ = _make_tracker()
        tracker.clear_all()
        assert tracker.sessions == ()
        assert port.get(KEY) is None

    def test_reload_after_mutations_matches_memory(self):
        tracker, port, clock, _ = _make_tracker()
        for shots in ("10", "20", "30"):
            tracker.add_session(_make_form(shots=shots, goals="1"))
            clock.advance()
        tracker.remove_session("id-2")

        reloaded, _, _, _ = _make_tracker(port=port)
        assert reloaded.sessions == tracker.sessions


# ======================================================================
# Write failures
# ======================================================================


class FailingPort(InMemoryKeyValuePort):
    """In-memory port whose writes can be switched off."""

    def __init__(self):
        super().__init__()
        self.fail = False

    def set(self, key, value):
        if self.fail:
            raise OSError("disk full")
        super().set(key, value)

    def delete(self, key):
        if self.fail:
            raise OSError("disk full")
        super().delete(key)


class TestWriteFailures:
    """A failed write raises and leaves the tracker exactly as it was."""

    def _tracker_with_one_session(self):
        tracker, port, clock, events = _make_tracker(port=FailingPort())
        tracker.add_session(_make_form())
        clock.advance()
        port.fail = True
        return tracker, port, events

    def test_failed_add_keeps_sessions_and_form(self):
        tracker, port, events = self._tracker_with_one_session()
        form = _make_form(shots="30", goals="9")
        before = (tracker.sessions, tracker.form, tracker.errors, events.names())

        with pytest.raises(OSError):
            tracker.add_session(form)

        assert (tracker.sessions, tracker.form, tracker.errors, events.names()) == before
        assert _stored_ids(port) == ["id-1"]

    def test_failed_add_can_be_retried(self):
        tracker, port, _ = self._tracker_with_one_session()
        with pytest.raises(OSError):
            tracker.add_session(_make_form())

        port.fail = False
        assert tracker.add_session(_make_form()) == []
        assert [s.id for s in tracker.sessions] == _stored_ids(port)

    def test_failed_remove_keeps_session(self):
        tracker, port, events = self._tracker_with_one_session()

        with pytest.raises(OSError):
            tracker.remove_session("id-1")

        assert [s.id for s in tracker.sessions] == ["id-1"]
        assert _stored_ids(port) == ["id-1"]
        assert SESSION_REMOVED not in events.names()

    def test_failed_clear_keeps_sessions(self):
        tracker, port, events = self._tracker_with_one_session()

        with pytest.raises(OSError):
            tracker.clear_all()

        assert [s.id for s in tracker.sessions] == ["id-1"]
        assert tracker.summary.total_shots == 20
        assert SESSIONS_CLEARED not in events.names()


# ======================================================================
# Read accessors
# ======================================================================


class TestReadAccessors:
    """Summary and suggestion follow the current collection."""

    def test_empty_tracker(self):
        tracker, _, _, _ = _make_tracker()
        assert tracker.summary.total_shots == 0
        assert tracker.advice.recommendation == FIRST_SESSION
        assert tracker.suggestion == message_for(FIRST_SESSION)

    def test_low_conversion_scenario(self):
        tracker, _, _, _ = _make_tracker()
        tracker.add_session(_make_form(shots="20", goals="3", duration_min="30", rpe="5"))
        assert tracker.suggestion == message_for(SIMPLIFY)
        assert tracker.summary.conversion_rate == pytest.approx(0.15)

    def test_suggestion_tracks_newest_session(self):
        tracker, _, clock, _ = _make_tracker()
        tracker.add_session(_make_form(shots="25", goals="2", rpe="9"))
        assert tracker.advice.recommendation == REDUCE_VOLUME

        clock.advance()
        tracker.add_session(_make_form(shots="15", goals="12", rpe="5"))
        assert tracker.advice.recommendation == INCREASE_DIFFICULTY

        tracker.remove_session("id-2")
        assert tracker.advice.recommendation == REDUCE_VOLUME

    def test_summary_recomputed_after_each_mutation(self):
        tracker, _, clock, _ = _make_tracker()
        tracker.add_session(_make_form(shots="10", goals="5", duration_min="20", rpe="4"))
        clock.advance()
        tracker.add_session(_make_form(shots="30", goals="5", duration_min="40", rpe="8"))

        summary = tracker.summary
        assert (summary.total_shots, summary.total_goals, summary.total_minutes) == (40, 10, 60)
        assert summary.average_rpe == pytest.approx(6.0)
        assert summary.conversion_rate == pytest.approx(0.25)

        tracker.clear_all()
        assert tracker.summary.total_shots == 0

    def test_sessions_snapshot_is_immutable(self):
        tracker, _, _, _ = _make_tracker()
        tracker.add_session(_make_form())
        snapshot = tracker.sessions
        with pytest.raises(AttributeError):
            snapshot.append(None)  # type: ignore[attr-defined]
