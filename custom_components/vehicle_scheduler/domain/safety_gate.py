"""Pure safety policy evaluation.

Decides whether a command may run given the latest snapshot and the policy.
It never writes to the activity log itself; a denial carries the entry text
and the engine writes it.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import SafetyDenied
from ..models import (
    PILOT_CURRENT_NOT_PLUGGED_IN,
    PILOT_CURRENT_UNKNOWN,
    Command,
    PolicyConfig,
    StateSnapshot,
)
from .pilot_current import get_pilot_current

REASON_INSUFFICIENT_CHARGE = "insufficient charge"
REASON_UNKNOWN_PLUG_STATE = "can't tell if plugged in"
REASON_NOT_PLUGGED_IN = "not plugged in"


@dataclass(frozen=True)
class SafetyDecision:
    """Decision made by the safety gate."""

    allowed: bool
    reason: str = ""
    entry: str = ""


_ALLOWED = SafetyDecision(allowed=True)


class SafetyGate:
    """Safety gate for commands flagged as requiring safe mode.

    Checks run in order and stop at the first failure:
    1. Minimum charge (if enabled)
    2. Plugged in (if enabled)
    """

    @staticmethod
    def evaluate(
        command: Command,
        snapshot: StateSnapshot,
        policy: PolicyConfig,
    ) -> SafetyDecision:
        """Evaluate a command against the policy.

        Args:
            command: Command about to be dispatched
            snapshot: Freshly fetched vehicle state
            policy: Policy loaded for this invocation

        Returns:
            SafetyDecision with at most one denial reason
        """
        if not policy.requires_safe_mode(command):
            return _ALLOWED

        name = command.display_name

        if policy.require_min_charge and snapshot.battery_percent < policy.min_charge_threshold:
            return SafetyDecision(
                allowed=False,
                reason=REASON_INSUFFICIENT_CHARGE,
                entry=f"{name}: Insufficient charge - aborted",
            )

        if policy.require_plugged_in:
            pilot_current = get_pilot_current(snapshot)
            if pilot_current == PILOT_CURRENT_UNKNOWN:
                return SafetyDecision(
                    allowed=False,
                    reason=REASON_UNKNOWN_PLUG_STATE,
                    entry=f"{name}: Can't tell if car is plugged in - aborted",
                )
            if pilot_current == PILOT_CURRENT_NOT_PLUGGED_IN:
                return SafetyDecision(
                    allowed=False,
                    reason=REASON_NOT_PLUGGED_IN,
                    entry=f"{name}: Car is not plugged in - aborted",
                )

        return _ALLOWED

    @staticmethod
    def is_safe(command: Command, snapshot: StateSnapshot, policy: PolicyConfig) -> bool:
        """Check whether a command may run."""
        return SafetyGate.evaluate(command, snapshot, policy).allowed

    @staticmethod
    def check(command: Command, snapshot: StateSnapshot, policy: PolicyConfig) -> None:
        """Raise SafetyDenied if the command may not run."""
        decision = SafetyGate.evaluate(command, snapshot, policy)
        if not decision.allowed:
            raise SafetyDenied(decision)
