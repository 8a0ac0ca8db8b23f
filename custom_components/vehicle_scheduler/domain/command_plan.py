"""Pure mapping from a command to the device calls it needs.

The dispatcher executes the plan; keeping the mapping here means it can be
tested without a vehicle.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..models import Command


class DeviceAction(str, Enum):
    """Device API operations a command can be made of."""

    SET_CHARGE_TARGET = "set_charge_target"
    START_CHARGING = "start_charging"
    STOP_CHARGING = "stop_charging"
    SET_TEMPERATURE = "set_temperature"
    START_CLIMATE = "start_climate"
    STOP_CLIMATE = "stop_climate"


@dataclass(frozen=True)
class DeviceCall:
    """One step of a command plan."""

    action: DeviceAction
    argument: float | None = None
    # Stop the plan here if this call fails
    abort_on_failure: bool = False
    # "already_set" answers count as success
    tolerate_already_set: bool = False


def plan_device_calls(command: Command, value: float = 0.0) -> list[DeviceCall]:
    """Build the ordered device calls for a command.

    Commands handled without touching the vehicle (AWAKE, SLEEP, UNPLUGGED,
    MESSAGE) get an empty plan.

    Args:
        command: Command to run
        value: Percent for charge commands, temperature for HVAC_ON

    Returns:
        Device calls in the order they must be issued
    """
    calls: list[DeviceCall] = []

    if command in (Command.CHARGE_SET, Command.CHARGE_ON):
        if value > 0:
            calls.append(
                DeviceCall(
                    DeviceAction.SET_CHARGE_TARGET,
                    argument=int(value),
                    tolerate_already_set=True,
                )
            )
        if command == Command.CHARGE_ON:
            calls.append(DeviceCall(DeviceAction.START_CHARGING))

    elif command == Command.CHARGE_OFF:
        calls.append(DeviceCall(DeviceAction.STOP_CHARGING))

    elif command == Command.HVAC_ON:
        if value > 0:
            calls.append(
                DeviceCall(
                    DeviceAction.SET_TEMPERATURE,
                    argument=value,
                    abort_on_failure=True,
                )
            )
        calls.append(DeviceCall(DeviceAction.START_CLIMATE))

    elif command == Command.HVAC_OFF:
        calls.append(DeviceCall(DeviceAction.STOP_CLIMATE))

    return calls
