"""Config flow for Vehicle Command Scheduler integration."""
from __future__ import annotations

from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.const import UnitOfTemperature
from homeassistant.core import callback
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers import selector

from .const import (
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
    DEFAULT_MIN_CHARGE_THRESHOLD,
    DEFAULT_NAME,
    DEFAULT_REQUIRE_MIN_CHARGE,
    DEFAULT_REQUIRE_PLUGGED_IN,
    DEFAULT_SAFE_MODE_COMMANDS,
    DEFAULT_VEHICLE_NAME,
    DOMAIN,
    TEMP_UNIT_CELSIUS,
    TEMP_UNIT_FAHRENHEIT,
)
from .models import Command

# Commands that make sense behind the safety policy
SAFE_MODE_COMMAND_OPTIONS = [
    {"value": command.value, "label": command.display_name}
    for command in (
        Command.CHARGE_SET,
        Command.CHARGE_ON,
        Command.CHARGE_OFF,
        Command.HVAC_ON,
        Command.HVAC_OFF,
        Command.UNPLUGGED,
        Command.MESSAGE,
    )
]

TEMPERATURE_UNIT_OPTIONS = [
    {"value": TEMP_UNIT_FAHRENHEIT, "label": "Fahrenheit"},
    {"value": TEMP_UNIT_CELSIUS, "label": "Celsius"},
]

OPTIONAL_ENTITIES = {
    CONF_RANGE_SENSOR: "sensor",
    CONF_CHARGING_STATE_SENSOR: "sensor",
    CONF_PILOT_CURRENT_SENSOR: "sensor",
    CONF_CHARGE_LIMIT_NUMBER: "number",
    CONF_CHARGE_SWITCH: "switch",
    CONF_CLIMATE_ENTITY: "climate",
    CONF_WAKE_BUTTON: "button",
}


def _notify_services(hass) -> list[dict[str, str]]:
    """Get list of available notify services."""
    notify_services = hass.services.async_services().get("notify", {})
    return [
        {"value": f"notify.{service}", "label": f"notify.{service}"}
        for service in notify_services.keys()
    ]


def _policy_schema(hass, get_value) -> vol.Schema:
    """Build the safety policy / preferences schema.

    Args:
        hass: Home Assistant instance (for the notify service list)
        get_value: Callable(key, default) returning the current value
    """
    schema_dict = {
        vol.Required(
            CONF_REQUIRE_MIN_CHARGE,
            default=get_value(CONF_REQUIRE_MIN_CHARGE, DEFAULT_REQUIRE_MIN_CHARGE),
        ): selector.BooleanSelector(),
        vol.Required(
            CONF_MIN_CHARGE_THRESHOLD,
            default=get_value(CONF_MIN_CHARGE_THRESHOLD, DEFAULT_MIN_CHARGE_THRESHOLD),
        ): selector.NumberSelector(
            selector.NumberSelectorConfig(
                min=0,
                max=100,
                step=1,
                unit_of_measurement="%",
                mode=selector.NumberSelectorMode.SLIDER,
            )
        ),
        vol.Required(
            CONF_REQUIRE_PLUGGED_IN,
            default=get_value(CONF_REQUIRE_PLUGGED_IN, DEFAULT_REQUIRE_PLUGGED_IN),
        ): selector.BooleanSelector(),
        vol.Required(
            CONF_SAFE_MODE_COMMANDS,
            default=get_value(CONF_SAFE_MODE_COMMANDS, DEFAULT_SAFE_MODE_COMMANDS),
        ): selector.SelectSelector(
            selector.SelectSelectorConfig(
                options=SAFE_MODE_COMMAND_OPTIONS,
                multiple=True,
                mode=selector.SelectSelectorMode.LIST,
            )
        ),
        vol.Required(
            CONF_TEMPERATURE_UNIT,
            default=get_value(CONF_TEMPERATURE_UNIT, _default_unit(hass)),
        ): selector.SelectSelector(
            selector.SelectSelectorConfig(
                options=TEMPERATURE_UNIT_OPTIONS,
                mode=selector.SelectSelectorMode.DROPDOWN,
            )
        ),
    }

    notify_key = vol.Optional(
        CONF_NOTIFY_SERVICE, default=get_value(CONF_NOTIFY_SERVICE, "")
    )
    if notify_services := _notify_services(hass):
        schema_dict[notify_key] = selector.SelectSelector(
            selector.SelectSelectorConfig(
                options=notify_services,
                mode=selector.SelectSelectorMode.DROPDOWN,
                custom_value=True,
            )
        )
    else:
        schema_dict[notify_key] = selector.TextSelector(
            selector.TextSelectorConfig(type=selector.TextSelectorType.TEXT)
        )

    return vol.Schema(schema_dict)


def _default_unit(hass) -> str:
    if hass.config.units.temperature_unit == UnitOfTemperature.FAHRENHEIT:
        return TEMP_UNIT_FAHRENHEIT
    return TEMP_UNIT_CELSIUS


def _validate_policy(user_input: dict[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}

    notify_service = user_input.get(CONF_NOTIFY_SERVICE, "")
    if notify_service and not notify_service.startswith("notify."):
        errors[CONF_NOTIFY_SERVICE] = "invalid_notify_service"

    return errors


class ConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Vehicle Command Scheduler."""

    VERSION = 1

    def __init__(self) -> None:
        """Initialize the config flow."""
        self.vehicle_info: dict[str, Any] = {}

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Step 1: Vehicle and its entities."""
        errors: dict[str, str] = {}

        await self.async_set_unique_id(DOMAIN)
        self._abort_if_unique_id_configured()

        if user_input is not None:
            if self.hass.states.get(user_input[CONF_BATTERY_SENSOR]) is None:
                errors[CONF_BATTERY_SENSOR] = "entity_not_found"

            if not errors:
                self.vehicle_info = user_input
                return await self.async_step_policy()

        schema_dict = {
            vol.Required(
                CONF_VEHICLE_NAME, default=DEFAULT_VEHICLE_NAME
            ): selector.TextSelector(),
            vol.Required(CONF_BATTERY_SENSOR): selector.EntitySelector(
                selector.EntitySelectorConfig(domain="sensor", device_class="battery")
            ),
        }
        for key, domain in OPTIONAL_ENTITIES.items():
            schema_dict[vol.Optional(key)] = selector.EntitySelector(
                selector.EntitySelectorConfig(domain=domain)
            )

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(schema_dict),
            errors=errors,
        )

    async def async_step_policy(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Step 2: Safety policy and preferences."""
        errors: dict[str, str] = {}

        if user_input is not None:
            errors = _validate_policy(user_input)
            if not errors:
                data = {**self.vehicle_info, **user_input}
                return self.async_create_entry(
                    title=f"{DEFAULT_NAME} ({data[CONF_VEHICLE_NAME]})", data=data
                )

        return self.async_show_form(
            step_id="policy",
            data_schema=_policy_schema(self.hass, lambda key, default: default),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> config_entries.OptionsFlow:
        """Create the options flow."""
        return OptionsFlowHandler(config_entry)


class OptionsFlowHandler(config_entries.OptionsFlow):
    """Handle options flow for Vehicle Command Scheduler."""

    def __init__(self, config_entry: config_entries.ConfigEntry) -> None:
        """Initialize options flow."""
        self._config_entry = config_entry

    def _get_value(self, key: str, default: Any) -> Any:
        """Get value from options or data with fallback to default."""
        return self._config_entry.options.get(
            key,
            self._config_entry.data.get(key, default)
        )

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Edit the safety policy and preferences."""
        errors: dict[str, str] = {}

        if user_input is not None:
            errors = _validate_policy(user_input)
            if not errors:
                return self.async_create_entry(title="", data=user_input)

        return self.async_show_form(
            step_id="init",
            data_schema=_policy_schema(self.hass, self._get_value),
            errors=errors,
        )
