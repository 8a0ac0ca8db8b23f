"""Execution engine - the entry point for running a scheduled command.

One invocation walks the states:
IDLE -> WAKING -> GATING -> DISPATCHING -> (RETRY_DISPATCHING) -> DONE

Failures never propagate to the caller. Every terminal outcome ends up in the
activity log, and reportable ones are also surfaced on the event bus.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from homeassistant.util import dt as dt_util

from ..domain.safety_gate import SafetyGate
from ..exceptions import (
    ERROR_COMMAND_FAILED,
    ERROR_DEVICE_UNREACHABLE,
    ERROR_SAFETY_DENIED,
    DeviceUnreachable,
    SafetyDenied,
)
from ..models import Command, MessageTarget, StateSnapshot
from ..scheduler_logging import get_logger
from .dispatcher import CommandDispatcher, DispatchResult
from .events import SchedulerEvent
from .retry import RetryOncePolicy
from .state import SchedulerState
from .wake import WakeRetryController

if TYPE_CHECKING:
    from .activity_log import ActivityLog
    from .context import ExecutionContext
    from .events import SchedulerEventBus
    from .vehicle import VehicleClient

WAKE_FAILED_ENTRY = "Can't wake vehicle - aborting"


class EngineState(str, Enum):
    """States of a single command invocation."""

    IDLE = "idle"
    WAKING = "waking"
    GATING = "gating"
    DISPATCHING = "dispatching"
    RETRY_DISPATCHING = "retry_dispatching"
    DONE = "done"


@dataclass
class CommandRun:
    """Record of one invocation, emitted when it finishes."""

    command: Command
    value: float
    states: list[EngineState] = field(default_factory=lambda: [EngineState.IDLE])
    error: str | None = None
    result: DispatchResult | None = None
    attempts: int = 0

    @property
    def state(self) -> EngineState:
        return self.states[-1]

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.result is not None and self.result.succeeded

    def advance(self, state: EngineState) -> None:
        self.states.append(state)

    def to_dict(self) -> dict[str, Any]:
        return {
            "command": self.command.value,
            "value": self.value,
            "states": [state.value for state in self.states],
            "error": self.error,
            "attempts": self.attempts,
            "entry": self.result.entry if self.result else None,
        }


class ExecutionEngine:
    """Sequences wake, safety check, dispatch, retry and logging."""

    def __init__(
        self,
        client: VehicleClient,
        context: ExecutionContext,
        activity_log: ActivityLog,
        events: SchedulerEventBus,
        state: SchedulerState | None = None,
        wake_controller: WakeRetryController | None = None,
        dispatcher: CommandDispatcher | None = None,
        retry_policy: RetryOncePolicy | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            client: Vehicle client
            context: Inactivity hint, preferences, notifier and renderer
            activity_log: Shared activity log
            events: Event bus for reportable activity
            state: Shared runtime state (created if not given)
            wake_controller: Override the default wake controller
            dispatcher: Override the default dispatcher
            retry_policy: Override the default retry-once policy
        """
        self.client = client
        self.context = context
        self.activity_log = activity_log
        self.events = events
        self.state = state or SchedulerState()
        self.wake_controller = wake_controller or WakeRetryController(
            client, context.inactivity
        )
        self.dispatcher = dispatcher or CommandDispatcher(client, context)
        self.retry_policy = retry_policy or RetryOncePolicy()
        self._logger = get_logger()

        # Serializes unplugged checks so each evaluates one consistent snapshot
        self._unplugged_lock = asyncio.Lock()

    async def async_run_command(
        self,
        command: Command | str,
        value: float = 0.0,
        message_target: MessageTarget | None = None,
    ) -> None:
        """Run one command to completion. Never raises.

        Args:
            command: Command to run
            value: Percent for charge commands, temperature for HVAC_ON
            message_target: Addressing record for MESSAGE
        """
        try:
            command = Command(command)
        except ValueError:
            self._logger.error("COMMAND_UNKNOWN", command=command)
            return

        run = CommandRun(command=command, value=value)

        self._logger.separator(f"COMMAND {command.name}")
        self._logger.info("COMMAND_START", command=command.value, value=value)

        try:
            await self.events.emit(
                SchedulerEvent.COMMAND_STARTED, command=command.value, value=value
            )
            if command == Command.UNPLUGGED:
                async with self._unplugged_lock:
                    await self._async_execute(run, message_target)
            else:
                await self._async_execute(run, message_target)
        except Exception as ex:
            self._logger.error(
                "COMMAND_CRASHED", command=command.value, error=str(ex)
            )
            run.error = ERROR_COMMAND_FAILED
            await self._async_log_activity(
                f"{command.display_name}: failed, {ex}", report=True
            )
        finally:
            run.advance(EngineState.DONE)
            self.state.last_command = command.value
            self.state.last_command_succeeded = run.succeeded
            self.state.commands_run += 1
            if not run.succeeded:
                self.state.commands_failed += 1

        self._logger.info("COMMAND_FINISHED", **run.to_dict())
        try:
            await self.events.emit(SchedulerEvent.COMMAND_FINISHED, run=run)
        except Exception as ex:
            self._logger.error(
                "COMMAND_FINISHED_EMIT_FAILED", command=command.value, error=str(ex)
            )

    async def _async_execute(
        self,
        run: CommandRun,
        message_target: MessageTarget | None,
    ) -> None:
        command = run.command
        policy = self.context.preferences.policy()
        snapshot: StateSnapshot | None = None

        # Sleep is a request to leave the vehicle alone, so never wake for it
        if command != Command.SLEEP:
            run.advance(EngineState.WAKING)
            try:
                snapshot = await self.wake_controller.async_ensure_awake_and_fetch()
            except DeviceUnreachable as ex:
                run.error = ERROR_DEVICE_UNREACHABLE
                await self._async_log_activity(WAKE_FAILED_ENTRY, report=True)
                await self.events.emit(
                    SchedulerEvent.WAKE_FAILED, command=command.value, attempts=ex.attempts
                )
                return
            self.state.last_snapshot = snapshot
            await self.events.emit(SchedulerEvent.SNAPSHOT_UPDATED, **snapshot.to_dict())

        run.advance(EngineState.GATING)
        try:
            SafetyGate.check(command, snapshot or StateSnapshot.invalid(), policy)
        except SafetyDenied as ex:
            run.error = ERROR_SAFETY_DENIED
            await self._async_log_activity(ex.decision.entry, report=True)
            await self.events.emit(
                SchedulerEvent.SAFETY_DENIED, command=command.value, reason=ex.reason
            )
            return

        run.advance(EngineState.DISPATCHING)

        def on_retry(first: DispatchResult) -> None:
            run.advance(EngineState.RETRY_DISPATCHING)
            self._logger.info(
                "DISPATCH_RETRY",
                command=command.value,
                explanation=first.outcome.explanation,
            )

        result, attempts = await self.retry_policy.async_run(
            lambda: self.dispatcher.async_dispatch(
                command, run.value, message_target, snapshot
            ),
            lambda attempt: attempt.succeeded,
            on_retry,
        )
        run.result = result
        run.attempts = attempts
        if not result.succeeded:
            run.error = ERROR_COMMAND_FAILED

        for note in result.notes:
            await self._async_log_activity(note, report=True)
        await self._async_log_activity(result.entry, report=result.reportable)

    async def _async_log_activity(self, entry: str, report: bool) -> None:
        """Append to the activity log, surfacing reportable entries."""
        self.activity_log.append(entry)
        if report:
            self.state.last_activity = entry
            self.state.last_activity_time = dt_util.now()
            try:
                await self.events.emit_activity(entry)
            except Exception as ex:
                self._logger.error("ACTIVITY_REPORT_FAILED", entry=entry, error=str(ex))
