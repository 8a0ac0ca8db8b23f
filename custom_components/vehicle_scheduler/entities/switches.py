"""Switch entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.components.switch import SwitchEntity
from homeassistant.helpers.entity import DeviceInfo, EntityCategory

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback
    from ..coordinator import VehicleSchedulerCoordinator

from ..const import DEFAULT_NAME, DOMAIN
from ..scheduler_logging import get_logger


class DebugLoggingSwitch(SwitchEntity):
    """Switch to control debug file logging.

    When ON: every scheduler event is also written to log files
    When OFF: standard Home Assistant logging only (default)
    """

    _attr_has_entity_name = True
    _attr_icon = "mdi:bug"
    _attr_entity_category = EntityCategory.DIAGNOSTIC

    def __init__(self, entry_id: str, coordinator: VehicleSchedulerCoordinator) -> None:
        """Initialize."""
        self._coordinator = coordinator
        self._logger = get_logger()

        self._attr_unique_id = f"{entry_id}_debug_logging"
        self._attr_name = "Debug Logging"
        self._attr_is_on = self._logger.file_logging_enabled
        self._log_size_kb = 0.0

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=f"{DEFAULT_NAME} ({coordinator.vehicle_name})",
            manufacturer="Vehicle Scheduler",
        )

    async def async_added_to_hass(self) -> None:
        """Read the current log size."""
        await self._async_refresh_log_size()

    async def async_turn_on(self, **kwargs) -> None:
        """Turn on debug logging."""
        self._coordinator.set_debug_logging(True)
        self._attr_is_on = True
        await self._async_refresh_log_size()
        self.async_write_ha_state()

    async def async_turn_off(self, **kwargs) -> None:
        """Turn off debug logging."""
        self._coordinator.set_debug_logging(False)
        self._attr_is_on = False
        await self._async_refresh_log_size()
        self.async_write_ha_state()

    async def _async_refresh_log_size(self) -> None:
        self._log_size_kb = await self.hass.async_add_executor_job(
            self._logger.get_total_size_kb
        )

    @property
    def extra_state_attributes(self) -> dict:
        """Return extra attributes."""
        return {
            "log_dir": str(self._logger.log_dir),
            "log_size_kb": self._log_size_kb,
        }


async def async_setup_switches(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: VehicleSchedulerCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up switch entities."""
    async_add_entities([
        DebugLoggingSwitch(entry.entry_id, coordinator),
    ])
