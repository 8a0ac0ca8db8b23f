"""Core module for Vehicle Command Scheduler.

Contains the command pipeline:
- ActivityLog: Append-only record of outcomes
- SchedulerEventBus: Event bus and reportable-activity side-channel
- HassVehicleClient: Vehicle access through HA entities
- WakeRetryController, CommandDispatcher, ExecutionEngine
"""

from .activity_log import ActivityLog
from .context import EntryPreferences, ExecutionContext, InactivityHint
from .dispatcher import CommandDispatcher, DispatchResult
from .engine import CommandRun, EngineState, ExecutionEngine
from .events import SchedulerEvent, SchedulerEventBus
from .retry import RetryOncePolicy
from .state import SchedulerState
from .vehicle import HassVehicleClient, VehicleClient, VehicleEntities
from .wake import WakeRetryController

__all__ = [
    "ActivityLog",
    "CommandDispatcher",
    "CommandRun",
    "DispatchResult",
    "EngineState",
    "EntryPreferences",
    "ExecutionContext",
    "ExecutionEngine",
    "HassVehicleClient",
    "InactivityHint",
    "RetryOncePolicy",
    "SchedulerEvent",
    "SchedulerEventBus",
    "SchedulerState",
    "VehicleClient",
    "VehicleEntities",
    "WakeRetryController",
]
