"""Vehicle Scheduler Coordinator - Thin orchestrator for all components.

It:
- Builds the execution context and the engine from the config entry
- Registers the run_command service
- Persists the activity log
- Pushes updates to the entities

It does NOT contain any command logic.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import voluptuous as vol

from homeassistant.core import ServiceCall, callback
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers import storage
from homeassistant.helpers.dispatcher import async_dispatcher_send

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

from .const import (
    ATTR_ADDRESS,
    ATTR_COMMAND,
    ATTR_MESSAGE,
    ATTR_SUBJECT,
    ATTR_TARGET,
    ATTR_VALUE,
    CONF_BATTERY_SENSOR,
    CONF_CHARGE_LIMIT_NUMBER,
    CONF_CHARGE_SWITCH,
    CONF_CHARGING_STATE_SENSOR,
    CONF_CLIMATE_ENTITY,
    CONF_PILOT_CURRENT_SENSOR,
    CONF_RANGE_SENSOR,
    CONF_VEHICLE_NAME,
    CONF_WAKE_BUTTON,
    DEFAULT_VEHICLE_NAME,
    DOMAIN,
    SERVICE_RUN_COMMAND,
    SIGNAL_UPDATE,
    STORAGE_KEY,
    STORAGE_SAVE_DELAY_SECONDS,
    STORAGE_VERSION,
)
from .core.activity_log import ActivityLog
from .core.context import EntryPreferences, ExecutionContext, InactivityHint
from .core.engine import ExecutionEngine
from .core.events import EventData, SchedulerEvent, SchedulerEventBus
from .core.state import SchedulerState
from .core.vehicle import HassVehicleClient, VehicleEntities
from .infra.notifier import Notifier, TemplateRenderer
from .models import Command, MessageTarget
from .scheduler_logging import get_logger

RUN_COMMAND_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_COMMAND): vol.All(
            cv.string, vol.Lower, vol.In([command.value for command in Command])
        ),
        vol.Optional(ATTR_VALUE, default=0.0): vol.Coerce(float),
        vol.Optional(ATTR_TARGET): vol.Schema(
            {
                vol.Required(ATTR_ADDRESS): cv.string,
                vol.Optional(ATTR_SUBJECT, default=""): cv.string,
                vol.Optional(ATTR_MESSAGE, default=""): cv.string,
            }
        ),
    }
)


class VehicleSchedulerCoordinator:
    """Thin orchestrator for the Vehicle Command Scheduler."""

    def __init__(self, hass: HomeAssistant, entry: ConfigEntry) -> None:
        """Initialize the coordinator."""
        self.hass = hass
        self.entry = entry
        self._unsubscribers = []
        self._logger = get_logger()

        self._logger.info("COORDINATOR_INIT_START", entry_id=entry.entry_id)

        self.state = SchedulerState()
        self.events = SchedulerEventBus(hass)
        self.activity_log = ActivityLog()

        self.inactivity = InactivityHint(on_change=self._update_sensors)
        self.preferences = EntryPreferences(hass, entry)
        self.context = ExecutionContext(
            inactivity=self.inactivity,
            preferences=self.preferences,
            notifier=Notifier(hass),
            renderer=TemplateRenderer(hass),
        )

        self.client = HassVehicleClient(hass, self._create_vehicle_entities())
        self.engine = ExecutionEngine(
            self.client,
            self.context,
            self.activity_log,
            self.events,
            state=self.state,
        )

        self._store = storage.Store(hass, STORAGE_VERSION, STORAGE_KEY)

        self._logger.info("COORDINATOR_INIT_COMPLETE")

    @property
    def vehicle_name(self) -> str:
        return self.entry.data.get(CONF_VEHICLE_NAME) or DEFAULT_VEHICLE_NAME

    def _create_vehicle_entities(self) -> VehicleEntities:
        """Create the entity map from the config entry."""
        data = self.entry.data
        return VehicleEntities(
            battery_sensor=data.get(CONF_BATTERY_SENSOR, ""),
            range_sensor=data.get(CONF_RANGE_SENSOR, ""),
            charging_state_sensor=data.get(CONF_CHARGING_STATE_SENSOR, ""),
            pilot_current_sensor=data.get(CONF_PILOT_CURRENT_SENSOR, ""),
            charge_limit_number=data.get(CONF_CHARGE_LIMIT_NUMBER, ""),
            charge_switch=data.get(CONF_CHARGE_SWITCH, ""),
            climate=data.get(CONF_CLIMATE_ENTITY, ""),
            wake_button=data.get(CONF_WAKE_BUTTON, ""),
        )

    async def async_init(self) -> None:
        """Initialize async components."""
        await self._load_data()

        self._unsubscribers.append(
            self.events.on(SchedulerEvent.COMMAND_FINISHED, self._on_command_finished)
        )
        self._register_services()

        self._logger.info("COORDINATOR_ASYNC_INIT_COMPLETE")

    async def _load_data(self) -> None:
        """Load the persisted activity log."""
        data = await self._store.async_load()
        restored = self.activity_log.restore(data)
        latest = self.activity_log.latest
        if latest is not None:
            self.state.last_activity = latest.text
            self.state.last_activity_time = latest.timestamp
        self._logger.info("ACTIVITY_LOG_LOADED", entries=restored)

    async def _save_data(self) -> None:
        await self._store.async_save(self.activity_log.to_dict())
        self._logger.debug("DATA_SAVED", entries=len(self.activity_log))

    def _register_services(self) -> None:
        """Register HA services."""
        self.hass.services.async_register(
            DOMAIN,
            SERVICE_RUN_COMMAND,
            self._handle_run_command,
            schema=RUN_COMMAND_SCHEMA,
        )
        self._logger.debug("SERVICES_REGISTERED")

    async def async_unload(self) -> None:
        """Unload the coordinator."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

        self.hass.services.async_remove(DOMAIN, SERVICE_RUN_COMMAND)
        await self._save_data()

        self._logger.info("COORDINATOR_UNLOADED")

    # ========== Service Handlers ==========

    async def _handle_run_command(self, call: ServiceCall) -> None:
        """Handle vehicle_scheduler.run_command."""
        target = None
        if target_data := call.data.get(ATTR_TARGET):
            target = MessageTarget(
                address=target_data[ATTR_ADDRESS],
                subject=target_data.get(ATTR_SUBJECT, ""),
                body=target_data.get(ATTR_MESSAGE, ""),
            )

        self.async_schedule_command(
            Command(call.data[ATTR_COMMAND]),
            call.data.get(ATTR_VALUE, 0.0),
            target,
        )

    @callback
    def async_schedule_command(
        self,
        command: Command,
        value: float = 0.0,
        message_target: MessageTarget | None = None,
    ) -> asyncio.Task:
        """Run a command as its own task so slow wakes never block the caller."""
        self._logger.info("COMMAND_SCHEDULED", command=command.value, value=value)
        return self.hass.async_create_task(
            self.engine.async_run_command(command, value, message_target)
        )

    # ========== Event Handlers ==========

    async def _on_command_finished(self, event: EventData) -> None:
        self._store.async_delay_save(
            self.activity_log.to_dict, STORAGE_SAVE_DELAY_SECONDS
        )

    # ========== Debug Logging ==========

    def set_debug_logging(self, enabled: bool) -> None:
        """Toggle file logging for troubleshooting."""
        self._logger.set_file_logging(enabled)
        self._logger.info("DEBUG_LOGGING_SET", enabled=enabled)

    # ========== Utility ==========

    @callback
    def _update_sensors(self) -> None:
        """Notify all sensors to update."""
        async_dispatcher_send(self.hass, SIGNAL_UPDATE)
