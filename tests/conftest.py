"""Fixtures for testing."""
import pytest
from unittest.mock import AsyncMock, MagicMock
from pytest_homeassistant_custom_component.common import MockConfigEntry

from homeassistant.core import HomeAssistant

from custom_components.vehicle_scheduler.const import (
    DOMAIN,
    CONF_BATTERY_SENSOR,
    CONF_CHARGE_LIMIT_NUMBER,
    CONF_CHARGE_SWITCH,
    CONF_CHARGING_STATE_SENSOR,
    CONF_CLIMATE_ENTITY,
    CONF_MIN_CHARGE_THRESHOLD,
    CONF_NOTIFY_SERVICE,
    CONF_PILOT_CURRENT_SENSOR,
    CONF_RANGE_SENSOR,
    CONF_REQUIRE_MIN_CHARGE,
    CONF_REQUIRE_PLUGGED_IN,
    CONF_SAFE_MODE_COMMANDS,
    CONF_TEMPERATURE_UNIT,
    CONF_VEHICLE_NAME,
    CONF_WAKE_BUTTON,
)
from custom_components.vehicle_scheduler.core.activity_log import ActivityLog
from custom_components.vehicle_scheduler.core.context import (
    ExecutionContext,
    InactivityHint,
)
from custom_components.vehicle_scheduler.core.engine import ExecutionEngine
from custom_components.vehicle_scheduler.core.wake import WakeRetryController
from custom_components.vehicle_scheduler.models import (
    Outcome,
    PolicyConfig,
    StateSnapshot,
)


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations):
    """Enable custom integrations defined in the test dir."""
    yield


def make_snapshot(
    battery: float = 60.0,
    vehicle_range: float = 150.0,
    charging_state: str | None = "charging",
    pilot_current: float | None = 32.0,
) -> StateSnapshot:
    """Build a valid snapshot."""
    return StateSnapshot(
        valid=True,
        battery_percent=battery,
        range=vehicle_range,
        charging_state=charging_state,
        pilot_current=pilot_current,
    )


@pytest.fixture
def mock_client():
    """Vehicle client that answers and accepts every command."""
    client = MagicMock()
    client.async_query_state = AsyncMock(return_value=make_snapshot())
    client.async_wake = AsyncMock()
    client.async_set_charge_target = AsyncMock(return_value=Outcome.succeeded())
    client.async_start_charging = AsyncMock(return_value=Outcome.succeeded())
    client.async_stop_charging = AsyncMock(return_value=Outcome.succeeded())
    client.async_set_temperature = AsyncMock(return_value=Outcome.succeeded())
    client.async_start_climate = AsyncMock(return_value=Outcome.succeeded())
    client.async_stop_climate = AsyncMock(return_value=Outcome.succeeded())
    return client


@pytest.fixture
def mock_preferences():
    """Preferences with the default policy."""
    preferences = MagicMock()
    preferences.policy.return_value = PolicyConfig()
    preferences.notification_address = "notify.mobile_app_phone"
    preferences.temperature_unit = "F"
    return preferences


@pytest.fixture
def mock_notifier():
    notifier = MagicMock()
    notifier.async_send = AsyncMock(return_value=True)
    return notifier


@pytest.fixture
def execution_context(mock_preferences, mock_notifier):
    """Execution context with mocked collaborators."""
    renderer = MagicMock()
    renderer.render.side_effect = lambda template: template
    return ExecutionContext(
        inactivity=InactivityHint(),
        preferences=mock_preferences,
        notifier=mock_notifier,
        renderer=renderer,
    )


@pytest.fixture
def mock_events():
    """Event bus stand-in recording emitted events."""
    events = MagicMock()
    events.emit = AsyncMock()
    events.emit_activity = AsyncMock()
    return events


@pytest.fixture
def activity_log():
    return ActivityLog()


@pytest.fixture
def engine(mock_client, execution_context, activity_log, mock_events):
    """Engine wired to mocks, with no delay between wake attempts."""
    return ExecutionEngine(
        mock_client,
        execution_context,
        activity_log,
        mock_events,
        wake_controller=WakeRetryController(
            mock_client, execution_context.inactivity, retry_delay=0
        ),
    )


@pytest.fixture
def mock_config_entry():
    """Mock a config entry."""
    entry = MagicMock()
    entry.data = {
        CONF_VEHICLE_NAME: "Model S",
        CONF_BATTERY_SENSOR: "sensor.car_battery",
        CONF_NOTIFY_SERVICE: "notify.mobile_app_phone",
        CONF_REQUIRE_MIN_CHARGE: True,
        CONF_MIN_CHARGE_THRESHOLD: 30,
        CONF_REQUIRE_PLUGGED_IN: False,
        CONF_SAFE_MODE_COMMANDS: ["hvac_on"],
        CONF_TEMPERATURE_UNIT: "F",
    }
    entry.options = {}
    entry.entry_id = "test_entry_id"
    return entry


ENTRY_DATA = {
    CONF_VEHICLE_NAME: "Model S",
    CONF_BATTERY_SENSOR: "sensor.car_battery",
    CONF_RANGE_SENSOR: "sensor.car_range",
    CONF_CHARGING_STATE_SENSOR: "sensor.car_charging_state",
    CONF_PILOT_CURRENT_SENSOR: "sensor.car_pilot_current",
    CONF_CHARGE_LIMIT_NUMBER: "number.car_charge_limit",
    CONF_CHARGE_SWITCH: "switch.car_charger",
    CONF_CLIMATE_ENTITY: "climate.car",
    CONF_WAKE_BUTTON: "button.car_wake",
    CONF_REQUIRE_MIN_CHARGE: True,
    CONF_MIN_CHARGE_THRESHOLD: 25,
    CONF_REQUIRE_PLUGGED_IN: False,
    CONF_SAFE_MODE_COMMANDS: ["hvac_on"],
    CONF_TEMPERATURE_UNIT: "C",
    CONF_NOTIFY_SERVICE: "notify.mobile_app_phone",
}


@pytest.fixture
def mock_vehicle_states():
    """Standard vehicle entity states."""
    return {
        "sensor.car_battery": ("55", {"unit_of_measurement": "%", "device_class": "battery"}),
        "sensor.car_range": ("120.5", {"unit_of_measurement": "km"}),
        "sensor.car_charging_state": ("Charging", {}),
        "sensor.car_pilot_current": ("32", {"unit_of_measurement": "A"}),
        "number.car_charge_limit": ("80", {}),
        "switch.car_charger": ("off", {}),
        "climate.car": ("off", {}),
        "button.car_wake": ("unknown", {}),
    }


@pytest.fixture
async def setup_integration(hass: HomeAssistant, mock_vehicle_states):
    """Set up integration with mock vehicle states."""
    for entity_id, (state, attributes) in mock_vehicle_states.items():
        hass.states.async_set(entity_id, state, attributes)

    entry = MockConfigEntry(domain=DOMAIN, data=dict(ENTRY_DATA), unique_id=DOMAIN)
    entry.add_to_hass(hass)

    await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()

    return entry
