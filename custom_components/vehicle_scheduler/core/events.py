"""Event bus for component communication.

Components report what happened through events instead of calling each
other. Reportable activity leaves the integration from here: it is fired on
the Home Assistant bus for automations and pushed to the entities.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from homeassistant.helpers.dispatcher import async_dispatcher_send
from homeassistant.util import dt as dt_util

from ..const import EVENT_ACTIVITY, SIGNAL_UPDATE
from ..scheduler_logging import get_logger

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class SchedulerEvent(str, Enum):
    """Event types for the scheduler."""

    # Command lifecycle
    COMMAND_STARTED = "vehicle_scheduler.command_started"
    COMMAND_FINISHED = "vehicle_scheduler.command_finished"

    # Activity
    ACTIVITY_REPORTED = "vehicle_scheduler.activity_reported"

    # Vehicle
    WAKE_FAILED = "vehicle_scheduler.wake_failed"
    SAFETY_DENIED = "vehicle_scheduler.safety_denied"
    SNAPSHOT_UPDATED = "vehicle_scheduler.snapshot_updated"


@dataclass
class EventData:
    """Container for event data."""

    event: SchedulerEvent
    timestamp: datetime
    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "event": self.event.value,
            "timestamp": self.timestamp.isoformat(),
            "data": self.data,
        }


EventHandler = Callable[[EventData], Awaitable[None]]


class SchedulerEventBus:
    """Central event bus for the integration."""

    def __init__(self, hass: HomeAssistant) -> None:
        """Initialize the event bus.

        Args:
            hass: Home Assistant instance
        """
        self.hass = hass
        self._logger = get_logger()
        self._handlers: dict[SchedulerEvent, list[EventHandler]] = {}

    async def emit(self, event: SchedulerEvent, **data: Any) -> None:
        """Emit an event to registered handlers.

        Handler errors are logged and do not stop other handlers.
        """
        event_data = EventData(event=event, timestamp=dt_util.now(), data=data)
        self._logger.debug(f"EVENT_{event.name}", **data)

        for handler in list(self._handlers.get(event, [])):
            try:
                await handler(event_data)
            except Exception as ex:
                self._logger.error(
                    "EVENT_HANDLER_ERROR",
                    event_name=event.name,
                    handler=getattr(handler, "__name__", repr(handler)),
                    error=str(ex),
                )

        if event == SchedulerEvent.ACTIVITY_REPORTED:
            self.hass.bus.async_fire(EVENT_ACTIVITY, {"entry": data.get("entry", "")})

        if event == SchedulerEvent.COMMAND_FINISHED:
            async_dispatcher_send(self.hass, SIGNAL_UPDATE)

    def on(self, event: SchedulerEvent, handler: EventHandler) -> Callable[[], None]:
        """Register an event handler.

        Returns:
            Unsubscribe function
        """
        self._handlers.setdefault(event, []).append(handler)

        def unsubscribe() -> None:
            self.off(event, handler)

        return unsubscribe

    def off(self, event: SchedulerEvent, handler: EventHandler) -> None:
        """Unregister an event handler."""
        if handler in self._handlers.get(event, []):
            self._handlers[event].remove(handler)

    async def emit_activity(self, entry: str) -> None:
        """Surface a reportable activity entry."""
        await self.emit(SchedulerEvent.ACTIVITY_REPORTED, entry=entry)
