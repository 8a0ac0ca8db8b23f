"""Errors raised inside the command pipeline.

None of these reach the caller of run_command; the engine converts them into
activity log entries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.exceptions import HomeAssistantError

if TYPE_CHECKING:
    from .domain.safety_gate import SafetyDecision


class VehicleSchedulerError(HomeAssistantError):
    """Base error for the integration."""


class DeviceUnreachable(VehicleSchedulerError):
    """The vehicle never returned a valid state within the wake budget."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"Vehicle unreachable after {attempts} wake attempts")
        self.attempts = attempts


class SafetyDenied(VehicleSchedulerError):
    """The safety gate refused to let a command run."""

    def __init__(self, decision: SafetyDecision) -> None:
        super().__init__(decision.entry)
        self.decision = decision

    @property
    def reason(self) -> str:
        return self.decision.reason


# Error kinds recorded on a finished command run
ERROR_DEVICE_UNREACHABLE = "device_unreachable"
ERROR_SAFETY_DENIED = "safety_denied"
ERROR_COMMAND_FAILED = "command_failed"
