"""
Next-session advisor — a rule-based suggestion from the latest session.

Only the most recently created session is consulted (the first element,
since the collection is kept newest first).  The rules are checked in a
fixed order and the first match wins:

    1. **No sessions** — prompt for a first entry.
    2. **Fatigue guard** — a hard session (high RPE) always means less
       volume next time, whatever the conversion was.
    3. **Low conversion** on a meaningful volume — simplify the drill.
    4. **High conversion** on a meaningful volume — make it harder.
    5. Otherwise — keep the volume, add one constraint.

The advisor does not look at trends across sessions.
"""

from __future__ import annotations

from typing import Optional, Sequence

from finishing.schemas.advisor import Advice, AdvisorConfig
from finishing.schemas.session import SessionRecord
from finishing.tracker.aggregator import conversion

# Singleton default config
DEFAULT_CONFIG = AdvisorConfig()

FIRST_SESSION = "first_session"
REDUCE_VOLUME = "reduce_volume"
SIMPLIFY = "simplify"
INCREASE_DIFFICULTY = "increase_difficulty"
ADD_CONSTRAINT = "add_constraint"

_MESSAGES: dict[str, str] = {
    FIRST_SESSION: "Add a session to get a simple next-session suggestion.",
    REDUCE_VOLUME: "High intensity (RPE ≥ 8). Next: reduce volume, focus on clean technique + placement.",
    SIMPLIFY: ("Low conversion today. Next: simplify (closer range / stationary ball) "
               "and aim for corners over power."),
    INCREASE_DIFFICULTY: ("Strong conversion. Next: increase difficulty "
                          "(weaker foot / one-touch / moving ball / time limit)."),
    ADD_CONSTRAINT: ("Keep reps similar. Next: add one constraint (weaker foot or one-touch) "
                     "while keeping conversion stable."),
}


# ======================================================================
# Decision
# ======================================================================


def _classify(latest: SessionRecord, config: AdvisorConfig) -> str:
    """Pick the recommendation label for the latest session."""
    conv = conversion(latest)

    # Fatigue has priority over every conversion rule.
    if latest.rpe >= config.fatigue_rpe:
        return REDUCE_VOLUME

    if latest.shots >= config.low_conversion_min_shots and conv < config.low_conversion_below:
        return SIMPLIFY

    if latest.shots >= config.high_conversion_min_shots and conv >= config.high_conversion_at_least:
        return INCREASE_DIFFICULTY

    return ADD_CONSTRAINT


def message_for(recommendation: str) -> str:
    """Return the user-facing text for a recommendation label."""
    return _MESSAGES[recommendation]


# ======================================================================
# Main entry points
# ======================================================================


def compute_advice(records: Sequence[SessionRecord], config: Optional[AdvisorConfig] = None, ) -> Advice:
    """Compute the structured next-session advice.

    Args:
        records: Sessions ordered newest first.
        config: Optional threshold override.

    Returns:
        :class:`Advice` with the recommendation label, its text and the
        conversion of the session it was based on.
    """
    if config is None:
        config = DEFAULT_CONFIG

    if not records:
        return Advice(recommendation=FIRST_SESSION, summary=message_for(FIRST_SESSION))

    latest = records[0]
    recommendation = _classify(latest, config)
    return Advice(recommendation=recommendation, summary=message_for(recommendation),
                  latest_conversion=conversion(latest), )


def next_suggestion(records: Sequence[SessionRecord], config: Optional[AdvisorConfig] = None, ) -> str:
    """Return the next-session suggestion text."""
    return compute_advice(records, config).summary
