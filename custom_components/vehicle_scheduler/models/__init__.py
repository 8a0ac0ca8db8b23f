"""Data models for Vehicle Command Scheduler."""

from .data_models import (
    PILOT_CURRENT_NOT_PLUGGED_IN,
    PILOT_CURRENT_UNKNOWN,
    Command,
    InactivityMode,
    LogEntry,
    MessageTarget,
    Outcome,
    PolicyConfig,
    StateSnapshot,
)

__all__ = [
    "PILOT_CURRENT_NOT_PLUGGED_IN",
    "PILOT_CURRENT_UNKNOWN",
    "Command",
    "InactivityMode",
    "LogEntry",
    "MessageTarget",
    "Outcome",
    "PolicyConfig",
    "StateSnapshot",
]
