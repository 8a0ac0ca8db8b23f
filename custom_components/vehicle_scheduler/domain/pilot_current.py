"""Pilot current derivation.

The vehicle reports a charging state and the current offered by the charger.
Together they collapse into one signal:
- -1: can't tell
- 0: not plugged in
- >0: plugged in, value is the offered current
"""

from __future__ import annotations

from ..models import PILOT_CURRENT_NOT_PLUGGED_IN, PILOT_CURRENT_UNKNOWN, StateSnapshot

CHARGING_STATE_DISCONNECTED = "disconnected"


def get_pilot_current(snapshot: StateSnapshot | None) -> int:
    """Derive the pilot current signal from a state snapshot.

    Args:
        snapshot: Snapshot fetched by the current invocation (may be None)

    Returns:
        -1, 0 or the positive pilot current in amps
    """
    if snapshot is None or not snapshot.valid:
        return PILOT_CURRENT_UNKNOWN

    if snapshot.charging_state == CHARGING_STATE_DISCONNECTED:
        return PILOT_CURRENT_NOT_PLUGGED_IN

    if snapshot.pilot_current is None or snapshot.pilot_current < 0:
        return PILOT_CURRENT_UNKNOWN

    return int(snapshot.pilot_current)
