"""Data models for Vehicle Command Scheduler."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ..const import DEFAULT_MIN_CHARGE_THRESHOLD, EXPLANATION_ALREADY_SET


class Command(str, Enum):
    """Commands a schedule can fire at the vehicle."""

    CHARGE_SET = "charge_set"
    CHARGE_ON = "charge_on"
    CHARGE_OFF = "charge_off"
    HVAC_ON = "hvac_on"
    HVAC_OFF = "hvac_off"
    AWAKE = "awake"
    SLEEP = "sleep"
    UNPLUGGED = "unplugged"
    MESSAGE = "message"

    @property
    def display_name(self) -> str:
        """Human readable name used in activity entries."""
        return _COMMAND_NAMES[self]


_COMMAND_NAMES = {
    Command.CHARGE_SET: "Charge Set",
    Command.CHARGE_ON: "Charge On",
    Command.CHARGE_OFF: "Charge Off",
    Command.HVAC_ON: "HVAC On",
    Command.HVAC_OFF: "HVAC Off",
    Command.AWAKE: "Awake",
    Command.SLEEP: "Sleep",
    Command.UNPLUGGED: "Unplugged",
    Command.MESSAGE: "Message",
}


class InactivityMode(str, Enum):
    """Inactivity hint values."""

    AWAKE = "awake"
    SLEEP = "sleep"


# Pilot current signal values; anything above zero is the plugged-in current
PILOT_CURRENT_UNKNOWN = -1
PILOT_CURRENT_NOT_PLUGGED_IN = 0


@dataclass(frozen=True)
class StateSnapshot:
    """Point-in-time read of the vehicle charge state."""

    valid: bool
    battery_percent: float = 0.0
    range: float = 0.0
    charging_state: str | None = None
    pilot_current: float | None = None
    fetched_at: datetime | None = None

    @classmethod
    def invalid(cls) -> StateSnapshot:
        """Snapshot for a read that did not succeed."""
        return cls(valid=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "valid": self.valid,
            "battery_percent": self.battery_percent,
            "range": self.range,
            "charging_state": self.charging_state,
            "pilot_current": self.pilot_current,
            "fetched_at": self.fetched_at.isoformat() if self.fetched_at else None,
        }


@dataclass(frozen=True)
class Outcome:
    """Result of a single device call or dispatch attempt."""

    success: bool
    explanation: str = ""

    @property
    def is_already_set(self) -> bool:
        """Check if the device reported the requested value was already in place."""
        return self.explanation == EXPLANATION_ALREADY_SET

    @classmethod
    def succeeded(cls, explanation: str = "") -> Outcome:
        return cls(True, explanation)

    @classmethod
    def failed(cls, explanation: str) -> Outcome:
        return cls(False, explanation)


@dataclass(frozen=True)
class MessageTarget:
    """Addressing record for the MESSAGE command.

    Subject and body are templates; the engine only hands them to the renderer.
    """

    address: str
    subject: str = ""
    body: str = ""


@dataclass(frozen=True)
class PolicyConfig:
    """Safety policy consulted before running gated commands."""

    require_min_charge: bool = False
    min_charge_threshold: int = DEFAULT_MIN_CHARGE_THRESHOLD
    require_plugged_in: bool = False
    safe_mode_commands: frozenset[Command] = field(
        default_factory=lambda: frozenset({Command.HVAC_ON})
    )

    def requires_safe_mode(self, command: Command) -> bool:
        return command in self.safe_mode_commands


@dataclass(frozen=True)
class LogEntry:
    """One line of the activity log."""

    timestamp: datetime
    text: str

    def format(self) -> str:
        """Render the entry the way the activity log displays it."""
        return f"[{self.timestamp:%m/%d/%y %H:%M}] {self.text}"

    def to_dict(self) -> dict[str, Any]:
        return {"timestamp": self.timestamp.isoformat(), "text": self.text}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LogEntry:
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            text=data["text"],
        )
