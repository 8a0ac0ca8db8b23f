"""Execution context injected into the engine.

Holds everything a command run needs beyond the vehicle itself: the
inactivity hint, the preferences, the notification sender and the message
renderer. Nothing is reached through module-level singletons.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Protocol

from homeassistant.const import UnitOfTemperature
from homeassistant.util import dt as dt_util

from ..const import (
    CONF_MIN_CHARGE_THRESHOLD,
    CONF_NOTIFY_SERVICE,
    CONF_REQUIRE_MIN_CHARGE,
    CONF_REQUIRE_PLUGGED_IN,
    CONF_SAFE_MODE_COMMANDS,
    CONF_TEMPERATURE_UNIT,
    DEFAULT_MIN_CHARGE_THRESHOLD,
    DEFAULT_REQUIRE_MIN_CHARGE,
    DEFAULT_REQUIRE_PLUGGED_IN,
    DEFAULT_SAFE_MODE_COMMANDS,
    TEMP_UNIT_CELSIUS,
    TEMP_UNIT_FAHRENHEIT,
)
from ..models import Command, InactivityMode, PolicyConfig
from ..scheduler_logging import get_logger

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant


class InactivityHint:
    """Inactivity hint shared with whatever manages vehicle sleep.

    ``mode`` is what the schedule asked for (AWAKE / SLEEP commands).
    ``state`` is what we last observed (set to awake whenever we wake the car).
    """

    def __init__(self, on_change: Callable[[], None] | None = None) -> None:
        self.mode: InactivityMode = InactivityMode.SLEEP
        self.state: InactivityMode = InactivityMode.SLEEP
        self.changed_at: datetime | None = None
        self._on_change = on_change
        self._logger = get_logger()

    def set_mode(self, mode: InactivityMode) -> None:
        self.mode = mode
        self._changed("INACTIVITY_MODE_SET", mode=mode.value)

    def set_state(self, state: InactivityMode) -> None:
        self.state = state
        self._changed("INACTIVITY_STATE_SET", state=state.value)

    def _changed(self, event: str, **data: Any) -> None:
        self.changed_at = dt_util.now()
        self._logger.debug(event, **data)
        if self._on_change is not None:
            self._on_change()


class Preferences(Protocol):
    """Read-only preferences consulted during a command run."""

    def policy(self) -> PolicyConfig: ...

    @property
    def notification_address(self) -> str: ...

    @property
    def temperature_unit(self) -> str: ...


class NotificationSender(Protocol):
    async def async_send(self, address: str, subject: str, body: str) -> bool: ...


class MessageRenderer(Protocol):
    def render(self, template: str) -> str: ...


class EntryPreferences:
    """Preferences backed by a config entry, options taking precedence over data.

    Every read goes back to the entry so option changes apply to the next run.
    """

    def __init__(self, hass: HomeAssistant, entry: ConfigEntry) -> None:
        self.hass = hass
        self.entry = entry

    def _get(self, key: str, default: Any) -> Any:
        return self.entry.options.get(key, self.entry.data.get(key, default))

    def policy(self) -> PolicyConfig:
        """Load the safety policy for one invocation."""
        commands = frozenset(
            Command(value)
            for value in self._get(CONF_SAFE_MODE_COMMANDS, DEFAULT_SAFE_MODE_COMMANDS)
        )
        return PolicyConfig(
            require_min_charge=bool(
                self._get(CONF_REQUIRE_MIN_CHARGE, DEFAULT_REQUIRE_MIN_CHARGE)
            ),
            min_charge_threshold=int(
                self._get(CONF_MIN_CHARGE_THRESHOLD, DEFAULT_MIN_CHARGE_THRESHOLD)
            ),
            require_plugged_in=bool(
                self._get(CONF_REQUIRE_PLUGGED_IN, DEFAULT_REQUIRE_PLUGGED_IN)
            ),
            safe_mode_commands=commands,
        )

    @property
    def notification_address(self) -> str:
        return self._get(CONF_NOTIFY_SERVICE, "") or ""

    @property
    def temperature_unit(self) -> str:
        """Preferred unit for HVAC temperatures, "F" or "C"."""
        unit = self._get(CONF_TEMPERATURE_UNIT, None)
        if unit in (TEMP_UNIT_FAHRENHEIT, TEMP_UNIT_CELSIUS):
            return unit
        if self.hass.config.units.temperature_unit == UnitOfTemperature.FAHRENHEIT:
            return TEMP_UNIT_FAHRENHEIT
        return TEMP_UNIT_CELSIUS


@dataclass
class ExecutionContext:
    """Collaborators shared by the engine and the dispatcher."""

    inactivity: InactivityHint
    preferences: Preferences
    notifier: NotificationSender
    renderer: MessageRenderer
