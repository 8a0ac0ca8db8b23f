"""Vehicle access layer - single point of access for the vehicle's entities.

The vehicle itself is owned by another integration; this module drives it
through that integration's entities:
- Read charge state from sensors
- Call number/switch/climate/button services for commands
- Turn every failure into an Outcome instead of raising
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from homeassistant.const import STATE_UNAVAILABLE, STATE_UNKNOWN, UnitOfTemperature
from homeassistant.util import dt as dt_util
from homeassistant.util.unit_conversion import TemperatureConverter

from ..const import EXPLANATION_ALREADY_SET, TEMP_UNIT_FAHRENHEIT
from ..models import Outcome, StateSnapshot
from ..scheduler_logging import get_logger

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class VehicleClient(Protocol):
    """Operations the engine needs from the vehicle."""

    async def async_query_state(self) -> StateSnapshot: ...

    async def async_wake(self) -> None: ...

    async def async_set_charge_target(self, percent: int) -> Outcome: ...

    async def async_start_charging(self) -> Outcome: ...

    async def async_stop_charging(self) -> Outcome: ...

    async def async_set_temperature(self, low: float, high: float, unit: str) -> Outcome: ...

    async def async_start_climate(self) -> Outcome: ...

    async def async_stop_climate(self) -> Outcome: ...


@dataclass(frozen=True)
class VehicleEntities:
    """Entity IDs the vehicle is exposed through."""

    battery_sensor: str
    range_sensor: str = ""
    charging_state_sensor: str = ""
    pilot_current_sensor: str = ""
    charge_limit_number: str = ""
    charge_switch: str = ""
    climate: str = ""
    wake_button: str = ""


class HassVehicleClient:
    """VehicleClient implemented on Home Assistant entities."""

    def __init__(self, hass: HomeAssistant, entities: VehicleEntities) -> None:
        """Initialize the client.

        Args:
            hass: Home Assistant instance
            entities: Entity IDs for the vehicle
        """
        self.hass = hass
        self.entities = entities
        self._logger = get_logger()

    # ========== State Reading ==========

    def _get_state(self, entity_id: str) -> str | None:
        """Raw entity state, or None if missing/unavailable."""
        if not entity_id:
            return None
        state = self.hass.states.get(entity_id)
        if state is None or state.state in (STATE_UNKNOWN, STATE_UNAVAILABLE):
            return None
        return state.state

    def _get_float(self, entity_id: str) -> float | None:
        value = self._get_state(entity_id)
        if value is None:
            return None
        try:
            return float(value)
        except (ValueError, TypeError):
            self._logger.warning("SENSOR_INVALID_VALUE", entity_id=entity_id, value=value)
            return None

    async def async_query_state(self) -> StateSnapshot:
        """Read a charge state snapshot.

        The snapshot is only valid when the battery level can be read.
        """
        battery = self._get_float(self.entities.battery_sensor)
        if battery is None:
            self._logger.debug("VEHICLE_STATE_INVALID", entity_id=self.entities.battery_sensor)
            return StateSnapshot.invalid()

        charging_state = self._get_state(self.entities.charging_state_sensor)
        snapshot = StateSnapshot(
            valid=True,
            battery_percent=battery,
            range=self._get_float(self.entities.range_sensor) or 0.0,
            charging_state=charging_state.lower() if charging_state else None,
            pilot_current=self._get_float(self.entities.pilot_current_sensor),
            fetched_at=dt_util.now(),
        )
        self._logger.debug("VEHICLE_STATE_READ", **snapshot.to_dict())
        return snapshot

    # ========== Commands ==========

    async def _call_service(
        self,
        domain: str,
        service: str,
        data: dict[str, Any],
    ) -> Outcome:
        """Call a service and convert the result into an Outcome."""
        try:
            await self.hass.services.async_call(domain, service, data, blocking=True)
        except Exception as ex:
            self._logger.warning(
                "VEHICLE_CALL_FAILED",
                service=f"{domain}.{service}",
                entity_id=data.get("entity_id"),
                error=str(ex),
            )
            return Outcome.failed(str(ex) or type(ex).__name__)

        self._logger.info(
            "VEHICLE_CALL_SUCCEEDED",
            service=f"{domain}.{service}",
            entity_id=data.get("entity_id"),
        )
        return Outcome.succeeded()

    async def async_wake(self) -> None:
        """Send a wake signal. The result is not consulted."""
        if not self.entities.wake_button:
            self._logger.debug("WAKE_BUTTON_NOT_CONFIGURED")
            return
        await self._call_service("button", "press", {"entity_id": self.entities.wake_button})

    async def async_set_charge_target(self, percent: int) -> Outcome:
        entity_id = self.entities.charge_limit_number
        if not entity_id:
            return Outcome.failed("charge limit not configured")

        if self._get_float(entity_id) == float(percent):
            return Outcome.failed(EXPLANATION_ALREADY_SET)

        return await self._call_service(
            "number", "set_value", {"entity_id": entity_id, "value": percent}
        )

    async def _set_charging(self, enable: bool) -> Outcome:
        if not self.entities.charge_switch:
            return Outcome.failed("charge switch not configured")
        return await self._call_service(
            "switch",
            "turn_on" if enable else "turn_off",
            {"entity_id": self.entities.charge_switch},
        )

    async def async_start_charging(self) -> Outcome:
        return await self._set_charging(True)

    async def async_stop_charging(self) -> Outcome:
        return await self._set_charging(False)

    async def async_set_temperature(self, low: float, high: float, unit: str) -> Outcome:
        """Set the climate target.

        Args:
            low: Lower target in the given unit
            high: Upper target in the given unit
            unit: "F" or "C"
        """
        if not self.entities.climate:
            return Outcome.failed("climate not configured")

        from_unit = (
            UnitOfTemperature.FAHRENHEIT
            if unit == TEMP_UNIT_FAHRENHEIT
            else UnitOfTemperature.CELSIUS
        )
        to_unit = self.hass.config.units.temperature_unit

        def convert(value: float) -> float:
            return round(TemperatureConverter.convert(value, from_unit, to_unit), 1)

        data: dict[str, Any] = {"entity_id": self.entities.climate}
        if low == high:
            data["temperature"] = convert(low)
        else:
            data["target_temp_low"] = convert(low)
            data["target_temp_high"] = convert(high)

        return await self._call_service("climate", "set_temperature", data)

    async def _set_climate(self, enable: bool) -> Outcome:
        if not self.entities.climate:
            return Outcome.failed("climate not configured")
        return await self._call_service(
            "climate",
            "turn_on" if enable else "turn_off",
            {"entity_id": self.entities.climate},
        )

    async def async_start_climate(self) -> Outcome:
        return await self._set_climate(True)

    async def async_stop_climate(self) -> Outcome:
        return await self._set_climate(False)
