"""Sensor entities using factory pattern.

Each sensor is one SensorDefinition reading from the coordinator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.const import PERCENTAGE
from homeassistant.core import callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity import DeviceInfo

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback
    from ..coordinator import VehicleSchedulerCoordinator

from ..const import ACTIVITY_ATTRIBUTE_ENTRIES, DEFAULT_NAME, DOMAIN, SIGNAL_UPDATE

# HA rejects longer states
MAX_STATE_LENGTH = 255


@dataclass
class SensorDefinition:
    """Definition for a sensor entity."""

    key: str  # Unique identifier
    name: str  # Display name
    value_fn: Callable[[Any], Any]  # Function to get value from coordinator
    attributes_fn: Callable[[Any], dict[str, Any]] | None = None
    unit: str | None = None
    device_class: SensorDeviceClass | None = None
    state_class: SensorStateClass | None = None
    icon: str | None = None


def _snapshot_value(coordinator, attribute: str) -> float | None:
    snapshot = coordinator.state.last_snapshot
    if snapshot is None or not snapshot.valid:
        return None
    return getattr(snapshot, attribute)


def _activity_attributes(coordinator) -> dict[str, Any]:
    entries = coordinator.activity_log.entries(ACTIVITY_ATTRIBUTE_ENTRIES)
    return {"entries": [entry.format() for entry in entries]}


def _last_command_attributes(coordinator) -> dict[str, Any]:
    state = coordinator.state
    return {
        "succeeded": state.last_command_succeeded,
        "commands_run": state.commands_run,
        "commands_failed": state.commands_failed,
    }


SENSOR_DEFINITIONS: list[SensorDefinition] = [
    # Activity
    SensorDefinition(
        key="last_activity",
        name="Last Activity",
        value_fn=lambda c: (c.state.last_activity or "No activity yet")[:MAX_STATE_LENGTH],
        attributes_fn=lambda c: {
            "timestamp": (
                c.state.last_activity_time.isoformat()
                if c.state.last_activity_time
                else None
            )
        },
        icon="mdi:text-box-outline",
    ),
    SensorDefinition(
        key="activity_log",
        name="Activity Log",
        value_fn=lambda c: len(c.activity_log),
        attributes_fn=_activity_attributes,
        icon="mdi:format-list-bulleted",
    ),
    SensorDefinition(
        key="last_command",
        name="Last Command",
        value_fn=lambda c: c.state.last_command or None,
        attributes_fn=_last_command_attributes,
        icon="mdi:car-cog",
    ),

    # Inactivity hint
    SensorDefinition(
        key="inactivity_mode",
        name="Inactivity Mode",
        value_fn=lambda c: c.inactivity.mode.value,
        attributes_fn=lambda c: {"observed_state": c.inactivity.state.value},
        icon="mdi:sleep",
    ),

    # Last fetched vehicle state
    SensorDefinition(
        key="last_battery_level",
        name="Last Battery Level",
        value_fn=lambda c: _snapshot_value(c, "battery_percent"),
        unit=PERCENTAGE,
        device_class=SensorDeviceClass.BATTERY,
        state_class=SensorStateClass.MEASUREMENT,
    ),
    SensorDefinition(
        key="last_range",
        name="Last Range",
        value_fn=lambda c: _snapshot_value(c, "range"),
        state_class=SensorStateClass.MEASUREMENT,
        icon="mdi:map-marker-distance",
    ),
]


class VehicleSchedulerSensor(SensorEntity):
    """Generic Vehicle Scheduler sensor entity."""

    _attr_has_entity_name = True
    _attr_should_poll = False

    def __init__(
        self,
        entry_id: str,
        coordinator: VehicleSchedulerCoordinator,
        definition: SensorDefinition,
    ) -> None:
        """Initialize the sensor."""
        self._coordinator = coordinator
        self._definition = definition

        self._attr_unique_id = f"{entry_id}_{definition.key}"
        self._attr_name = definition.name
        self._attr_native_unit_of_measurement = definition.unit
        self._attr_device_class = definition.device_class
        self._attr_state_class = definition.state_class
        if definition.icon:
            self._attr_icon = definition.icon

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=f"{DEFAULT_NAME} ({coordinator.vehicle_name})",
            manufacturer="Vehicle Scheduler",
        )

    async def async_added_to_hass(self) -> None:
        """Register for updates."""
        self.async_on_remove(
            async_dispatcher_connect(self.hass, SIGNAL_UPDATE, self._handle_update)
        )
        self._handle_update()

    @callback
    def _handle_update(self) -> None:
        """Handle state update."""
        try:
            self._attr_native_value = self._definition.value_fn(self._coordinator)
            if self._definition.attributes_fn is not None:
                self._attr_extra_state_attributes = self._definition.attributes_fn(
                    self._coordinator
                )
        except (ValueError, TypeError, AttributeError, KeyError):
            self._attr_native_value = None
        self.async_write_ha_state()


async def async_setup_sensors(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: VehicleSchedulerCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up all sensor entities."""
    async_add_entities(
        VehicleSchedulerSensor(entry.entry_id, coordinator, definition)
        for definition in SENSOR_DEFINITIONS
    )
