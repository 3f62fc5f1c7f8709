"""What would the tracker suggest after a week of finishing work?

Replays a fixed set of sessions through an in-memory tracker and prints
the summary and the suggestion after each one.

Usage:
    python scripts/simulate_sessions.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

from finishing.core.config import Settings
from finishing.core.events import RecordingEventSink
from finishing.db.ports import InMemoryKeyValuePort
from finishing.main import create_tracker
from finishing.schemas.session import Foot, SessionForm
from finishing.tracker.aggregator import conversion, format_percent

# ─── date, foot, shots, goals, minutes, rpe, notes ──────────────────
RAW_DATA = [
    ("2026-10-12", Foot.RIGHT, "30", "12", "40", "6", "Edge of the box, stationary"),
    ("2026-10-13", Foot.RIGHT, "25", "3", "35", "5", "Volleys from crosses"),
    ("2026-10-14", Foot.BOTH, "20", "14", "30", "6", "Close range, both feet"),
    ("2026-10-16", Foot.LEFT, "24", "9", "45", "9", "Weak foot, long session"),
    ("2026-10-17", Foot.RIGHT, "18", "7", "25", "4", ""),
    ("2026-10-18", Foot.RIGHT, "x", "7", "25", "11", "Typo on purpose"),
]


def main() -> None:
    config = Settings(STORAGE_BACKEND="memory", LOG_LEVEL="WARNING")
    events = RecordingEventSink()
    tracker = create_tracker(config, port=InMemoryKeyValuePort(), event_sink=events)

    print("=" * 72)
    print("Finishing session simulation")
    print("=" * 72)

    for date, foot, shots, goals, minutes, rpe, notes in RAW_DATA:
        form = SessionForm(date=date, foot=foot, shots=shots, goals=goals, duration_min=minutes, rpe=rpe,
                           notes=notes)
        errors = tracker.add_session(form)

        print()
        print(f"  {date}  {foot.value:<5}  shots={shots:<3} goals={goals:<3} rpe={rpe}")
        if errors:
            for error in errors:
                print(f"    rejected: {error}")
            continue

        latest = tracker.sessions[0]
        summary = tracker.summary
        print(f"    session conversion: {format_percent(conversion(latest))}")
        print(f"    totals: {summary.total_shots} shots, {summary.total_goals} goals, "
              f"{summary.total_minutes} min, avg RPE {summary.average_rpe:.1f}, "
              f"conversion {format_percent(summary.conversion_rate)}")
        print(f"    next: {tracker.suggestion}")

    print()
    print("-" * 72)
    print(f"  Events: {', '.join(events.names())}")
    tracker.close()


if __name__ == "__main__":
    main()
