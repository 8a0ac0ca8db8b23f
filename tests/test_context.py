"""Test preferences and the inactivity hint."""
from unittest.mock import MagicMock

from homeassistant.core import HomeAssistant

from custom_components.vehicle_scheduler.const import (
    CONF_MIN_CHARGE_THRESHOLD,
    CONF_REQUIRE_PLUGGED_IN,
    CONF_SAFE_MODE_COMMANDS,
    CONF_TEMPERATURE_UNIT,
)
from custom_components.vehicle_scheduler.core.context import (
    EntryPreferences,
    InactivityHint,
)
from custom_components.vehicle_scheduler.models import Command, InactivityMode


def test_policy_from_entry_data(hass: HomeAssistant, mock_config_entry):
    preferences = EntryPreferences(hass, mock_config_entry)

    policy = preferences.policy()

    assert policy.require_min_charge
    assert policy.min_charge_threshold == 30
    assert not policy.require_plugged_in
    assert policy.safe_mode_commands == frozenset({Command.HVAC_ON})
    assert preferences.notification_address == "notify.mobile_app_phone"
    assert preferences.temperature_unit == "F"


def test_options_override_data(hass: HomeAssistant, mock_config_entry):
    """Option changes apply on the next read."""
    preferences = EntryPreferences(hass, mock_config_entry)
    assert preferences.policy().min_charge_threshold == 30

    mock_config_entry.options = {
        CONF_MIN_CHARGE_THRESHOLD: 50.0,
        CONF_REQUIRE_PLUGGED_IN: True,
        CONF_SAFE_MODE_COMMANDS: ["hvac_on", "charge_on"],
    }
    policy = preferences.policy()

    assert policy.min_charge_threshold == 50
    assert policy.require_plugged_in
    assert policy.safe_mode_commands == frozenset({Command.HVAC_ON, Command.CHARGE_ON})


def test_defaults_for_empty_entry(hass: HomeAssistant):
    entry = MagicMock()
    entry.data = {}
    entry.options = {}
    preferences = EntryPreferences(hass, entry)

    policy = preferences.policy()

    assert not policy.require_min_charge
    assert policy.min_charge_threshold == 25
    assert policy.safe_mode_commands == frozenset({Command.HVAC_ON})
    assert preferences.notification_address == ""
    # Test instance runs the metric system
    assert preferences.temperature_unit == "C"


def test_temperature_unit_option(hass: HomeAssistant, mock_config_entry):
    mock_config_entry.options = {CONF_TEMPERATURE_UNIT: "C"}
    assert EntryPreferences(hass, mock_config_entry).temperature_unit == "C"


def test_inactivity_hint_changes():
    on_change = MagicMock()
    hint = InactivityHint(on_change=on_change)
    assert hint.mode == InactivityMode.SLEEP

    hint.set_mode(InactivityMode.AWAKE)
    hint.set_state(InactivityMode.AWAKE)

    assert hint.mode == InactivityMode.AWAKE
    assert hint.state == InactivityMode.AWAKE
    assert hint.changed_at is not None
    assert on_change.call_count == 2
