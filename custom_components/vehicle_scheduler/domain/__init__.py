"""Domain logic module - pure logic without HA dependencies.

All modules in this package:
- Take inputs and produce outputs
- Have no side effects
- Don't access HA directly
"""

from .command_plan import DeviceAction, DeviceCall, plan_device_calls
from .pilot_current import get_pilot_current
from .safety_gate import SafetyDecision, SafetyGate

__all__ = [
    "DeviceAction",
    "DeviceCall",
    "SafetyDecision",
    "SafetyGate",
    "get_pilot_current",
    "plan_device_calls",
]
