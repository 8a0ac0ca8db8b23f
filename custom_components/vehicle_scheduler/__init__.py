"""The Vehicle Command Scheduler integration.

Runs scheduled vehicle commands (charge, climate, wake state, unplugged
check, notifications) on behalf of Home Assistant automations:
- Wake with bounded polling (core/wake.py)
- Safety policy on fresh state (domain/safety_gate.py)
- Dispatch with one retry (core/dispatcher.py, core/retry.py)
- Activity log of every outcome (core/activity_log.py)
"""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant

from .const import DOMAIN
from .coordinator import VehicleSchedulerCoordinator

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [
    Platform.SENSOR,
    Platform.SWITCH,
]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Vehicle Command Scheduler from a config entry."""
    hass.data.setdefault(DOMAIN, {})

    coordinator = VehicleSchedulerCoordinator(hass, entry)
    await coordinator.async_init()

    hass.data[DOMAIN][entry.entry_id] = coordinator

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    _LOGGER.info("Vehicle Command Scheduler initialized for %s", coordinator.vehicle_name)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    if unload_ok := await hass.config_entries.async_unload_platforms(entry, PLATFORMS):
        coordinator: VehicleSchedulerCoordinator = hass.data[DOMAIN].pop(entry.entry_id)
        await coordinator.async_unload()

    return unload_ok
