"""Entities module - HA entity definitions using factory pattern.

All entities are thin wrappers that:
- Read from the coordinator (runtime state, activity log, inactivity hint)
- Delegate actions to the coordinator
"""

from .sensors import SENSOR_DEFINITIONS, async_setup_sensors
from .switches import async_setup_switches

__all__ = [
    "async_setup_sensors",
    "async_setup_switches",
    "SENSOR_DEFINITIONS",
]
