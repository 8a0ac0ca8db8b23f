"""Command dispatcher - runs one dispatch attempt for a command."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from homeassistant.exceptions import TemplateError

from ..domain.command_plan import DeviceAction, DeviceCall, plan_device_calls
from ..domain.pilot_current import get_pilot_current
from ..models import (
    PILOT_CURRENT_NOT_PLUGGED_IN,
    PILOT_CURRENT_UNKNOWN,
    Command,
    InactivityMode,
    MessageTarget,
    Outcome,
    StateSnapshot,
)
from ..scheduler_logging import get_logger

if TYPE_CHECKING:
    from .context import ExecutionContext
    from .vehicle import VehicleClient

UNPLUGGED_NOTIFIED = "unplugged, notification sent"
UNPLUGGED_UNKNOWN = "can't tell, no notification sent"
UNPLUGGED_PLUGGED_IN = "plugged in, no notification sent"

DEFAULT_MESSAGE_SUBJECT = "No subject was specified"
DEFAULT_MESSAGE_BODY = "No body was specified"


@dataclass
class DispatchResult:
    """Normalized result of one dispatch attempt."""

    command: Command
    outcome: Outcome
    succeeded: bool
    entry: str
    reportable: bool = True
    # Extra activity lines produced along the way
    notes: list[str] = field(default_factory=list)


def format_entry(command: Command, value: float, succeeded: bool, explanation: str) -> str:
    """Build the activity entry for a dispatch attempt."""
    name = command.display_name
    if value > 0:
        name = f"{name} ({value:3.1f})"
    if succeeded:
        return f"{name}: succeeded"
    return f"{name}: failed, {explanation}"


class CommandDispatcher:
    """Maps a command onto device calls and interprets the result."""

    def __init__(self, client: VehicleClient, context: ExecutionContext) -> None:
        """Initialize the dispatcher.

        Args:
            client: Vehicle client for device calls
            context: Execution context (inactivity hint, preferences, notifier)
        """
        self.client = client
        self.context = context
        self._logger = get_logger()

    async def async_dispatch(
        self,
        command: Command,
        value: float,
        message_target: MessageTarget | None,
        snapshot: StateSnapshot | None,
    ) -> DispatchResult:
        """Run one dispatch attempt.

        Args:
            command: Command to dispatch
            value: Numeric parameter (percent or temperature)
            message_target: Addressing record for MESSAGE
            snapshot: Snapshot fetched by this invocation (None for SLEEP)

        Returns:
            DispatchResult with the raw outcome and the activity entry
        """
        notes: list[str] = []
        reportable = command not in (Command.UNPLUGGED, Command.MESSAGE)

        try:
            if command == Command.AWAKE:
                self.context.inactivity.set_mode(InactivityMode.AWAKE)
                outcome, succeeded = Outcome.succeeded(), True
            elif command == Command.SLEEP:
                self.context.inactivity.set_mode(InactivityMode.SLEEP)
                outcome, succeeded = Outcome.succeeded(), True
            elif command == Command.UNPLUGGED:
                outcome = await self._async_unplugged_check(snapshot)
                succeeded = outcome.success
            elif command == Command.MESSAGE:
                outcome = await self._async_send_message(message_target)
                succeeded = outcome.success
            else:
                outcome, succeeded = await self._async_run_plan(
                    plan_device_calls(command, value), notes
                )
        except Exception as ex:
            # Counts as a failed attempt so the retry still applies
            self._logger.error("DISPATCH_ERROR", command=command.value, error=str(ex))
            outcome, succeeded = Outcome.failed(str(ex)), False

        entry = format_entry(command, value, succeeded, outcome.explanation)
        self._logger.debug(
            "DISPATCH_ATTEMPT",
            command=command.value,
            success=succeeded,
            explanation=outcome.explanation,
        )
        return DispatchResult(
            command=command,
            outcome=outcome,
            succeeded=succeeded,
            entry=entry,
            reportable=reportable,
            notes=notes,
        )

    # ========== Device Commands ==========

    async def _async_run_plan(
        self,
        plan: list[DeviceCall],
        notes: list[str],
    ) -> tuple[Outcome, bool]:
        """Issue the planned calls; the last issued call decides the outcome."""
        outcome, succeeded = Outcome.succeeded(), True

        for call in plan:
            outcome = await self._async_execute(call)
            succeeded = outcome.success or (
                call.tolerate_already_set and outcome.is_already_set
            )

            if call.action == DeviceAction.SET_CHARGE_TARGET and not succeeded:
                notes.append(f"Unable to set charge target: {outcome.explanation}")

            if not succeeded and call.abort_on_failure:
                break

        return outcome, succeeded

    async def _async_execute(self, call: DeviceCall) -> Outcome:
        action = call.action
        if action == DeviceAction.SET_CHARGE_TARGET:
            return await self.client.async_set_charge_target(int(call.argument or 0))
        if action == DeviceAction.START_CHARGING:
            return await self.client.async_start_charging()
        if action == DeviceAction.STOP_CHARGING:
            return await self.client.async_stop_charging()
        if action == DeviceAction.SET_TEMPERATURE:
            temp = float(call.argument or 0)
            return await self.client.async_set_temperature(
                temp, temp, self.context.preferences.temperature_unit
            )
        if action == DeviceAction.START_CLIMATE:
            return await self.client.async_start_climate()
        if action == DeviceAction.STOP_CLIMATE:
            return await self.client.async_stop_climate()
        raise ValueError(f"Unsupported device action: {action}")

    # ========== Local Commands ==========

    async def _async_unplugged_check(self, snapshot: StateSnapshot | None) -> Outcome:
        """Notify if the vehicle is not plugged in. Never fails."""
        pilot_current = get_pilot_current(snapshot)

        if pilot_current == PILOT_CURRENT_NOT_PLUGGED_IN:
            vehicle_range = int(snapshot.range) if snapshot else 0
            sent = await self.context.notifier.async_send(
                self.context.preferences.notification_address,
                "Your car is not plugged in",
                f"Your car is not plugged in. Range = {vehicle_range}",
            )
            if not sent:
                self._logger.warning("UNPLUGGED_NOTIFICATION_NOT_SENT")
            return Outcome.succeeded(UNPLUGGED_NOTIFIED)

        if pilot_current == PILOT_CURRENT_UNKNOWN:
            return Outcome.succeeded(UNPLUGGED_UNKNOWN)

        return Outcome.succeeded(UNPLUGGED_PLUGGED_IN)

    async def _async_send_message(self, target: MessageTarget | None) -> Outcome:
        notifier = self.context.notifier

        if target is None:
            sent = await notifier.async_send(
                self.context.preferences.notification_address,
                DEFAULT_MESSAGE_SUBJECT,
                DEFAULT_MESSAGE_BODY,
            )
        else:
            try:
                subject = self.context.renderer.render(target.subject)
                body = self.context.renderer.render(target.body)
            except TemplateError as ex:
                self._logger.error("MESSAGE_RENDER_FAILED", error=str(ex))
                return Outcome.failed(f"message render failed: {ex}")
            sent = await notifier.async_send(target.address, subject, body)

        return Outcome.succeeded() if sent else Outcome.failed("notification not sent")
