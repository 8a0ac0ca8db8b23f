"""Test the Home Assistant backed vehicle client."""
import pytest
from pytest_homeassistant_custom_component.common import async_mock_service

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError

from custom_components.vehicle_scheduler.core.vehicle import (
    HassVehicleClient,
    VehicleEntities,
)

ENTITIES = VehicleEntities(
    battery_sensor="sensor.car_battery",
    range_sensor="sensor.car_range",
    charging_state_sensor="sensor.car_charging_state",
    pilot_current_sensor="sensor.car_pilot_current",
    charge_limit_number="number.car_charge_limit",
    charge_switch="switch.car_charger",
    climate="climate.car",
    wake_button="button.car_wake",
)


@pytest.fixture
def client(hass: HomeAssistant):
    return HassVehicleClient(hass, ENTITIES)


@pytest.mark.asyncio
async def test_query_state(hass: HomeAssistant, client):
    hass.states.async_set("sensor.car_battery", "64")
    hass.states.async_set("sensor.car_range", "201.3")
    hass.states.async_set("sensor.car_charging_state", "Disconnected")
    hass.states.async_set("sensor.car_pilot_current", "unavailable")

    snapshot = await client.async_query_state()

    assert snapshot.valid
    assert snapshot.battery_percent == 64.0
    assert snapshot.range == 201.3
    assert snapshot.charging_state == "disconnected"
    assert snapshot.pilot_current is None
    assert snapshot.fetched_at is not None


@pytest.mark.asyncio
@pytest.mark.parametrize("battery_state", [None, "unavailable", "unknown", "asleep"])
async def test_query_state_invalid(hass: HomeAssistant, client, battery_state):
    """Without a numeric battery level the vehicle counts as not answering."""
    if battery_state is not None:
        hass.states.async_set("sensor.car_battery", battery_state)

    snapshot = await client.async_query_state()

    assert not snapshot.valid


@pytest.mark.asyncio
async def test_wake_presses_button(hass: HomeAssistant, client):
    calls = async_mock_service(hass, "button", "press")

    await client.async_wake()

    assert len(calls) == 1
    assert calls[0].data["entity_id"] == "button.car_wake"


@pytest.mark.asyncio
async def test_wake_without_button(hass: HomeAssistant):
    client = HassVehicleClient(hass, VehicleEntities(battery_sensor="sensor.car_battery"))
    calls = async_mock_service(hass, "button", "press")

    await client.async_wake()

    assert calls == []


@pytest.mark.asyncio
async def test_set_charge_target(hass: HomeAssistant, client):
    hass.states.async_set("number.car_charge_limit", "80")
    calls = async_mock_service(hass, "number", "set_value")

    outcome = await client.async_set_charge_target(90)

    assert outcome.success
    assert calls[0].data == {"entity_id": "number.car_charge_limit", "value": 90}


@pytest.mark.asyncio
async def test_set_charge_target_already_set(hass: HomeAssistant, client):
    hass.states.async_set("number.car_charge_limit", "80.0")
    calls = async_mock_service(hass, "number", "set_value")

    outcome = await client.async_set_charge_target(80)

    assert not outcome.success
    assert outcome.is_already_set
    assert calls == []


@pytest.mark.asyncio
async def test_charging_switch(hass: HomeAssistant, client):
    on_calls = async_mock_service(hass, "switch", "turn_on")
    off_calls = async_mock_service(hass, "switch", "turn_off")

    assert (await client.async_start_charging()).success
    assert (await client.async_stop_charging()).success

    assert on_calls[0].data["entity_id"] == "switch.car_charger"
    assert off_calls[0].data["entity_id"] == "switch.car_charger"


@pytest.mark.asyncio
async def test_set_temperature_converted(hass: HomeAssistant, client):
    """Fahrenheit preferences are converted to the metric test system."""
    calls = async_mock_service(hass, "climate", "set_temperature")

    outcome = await client.async_set_temperature(68.0, 68.0, "F")

    assert outcome.success
    assert calls[0].data == {"entity_id": "climate.car", "temperature": 20.0}


@pytest.mark.asyncio
async def test_set_temperature_range(hass: HomeAssistant, client):
    calls = async_mock_service(hass, "climate", "set_temperature")

    await client.async_set_temperature(19.0, 22.0, "C")

    assert calls[0].data["target_temp_low"] == 19.0
    assert calls[0].data["target_temp_high"] == 22.0


@pytest.mark.asyncio
async def test_climate_on_off(hass: HomeAssistant, client):
    on_calls = async_mock_service(hass, "climate", "turn_on")
    off_calls = async_mock_service(hass, "climate", "turn_off")

    await client.async_start_climate()
    await client.async_stop_climate()

    assert len(on_calls) == 1
    assert len(off_calls) == 1


@pytest.mark.asyncio
async def test_service_error_becomes_outcome(hass: HomeAssistant, client):
    async def failing(call):
        raise HomeAssistantError("vehicle did not respond")

    hass.services.async_register("switch", "turn_off", failing)

    outcome = await client.async_stop_charging()

    assert not outcome.success
    assert outcome.explanation == "vehicle did not respond"


@pytest.mark.asyncio
async def test_missing_entities(hass: HomeAssistant):
    client = HassVehicleClient(hass, VehicleEntities(battery_sensor="sensor.car_battery"))

    assert (await client.async_set_charge_target(80)).explanation == "charge limit not configured"
    assert (await client.async_start_charging()).explanation == "charge switch not configured"
    assert (await client.async_start_climate()).explanation == "climate not configured"
    assert (
        await client.async_set_temperature(70, 70, "F")
    ).explanation == "climate not configured"
