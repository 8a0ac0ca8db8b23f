"""Runtime state shared between the engine and the entities.

Entities only read from here; the engine is the only writer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..models import StateSnapshot


@dataclass
class SchedulerState:
    """Latest observable results of command runs."""

    last_activity: str = ""
    last_activity_time: datetime | None = None
    last_snapshot: StateSnapshot | None = None
    last_command: str = ""
    last_command_succeeded: bool | None = None
    commands_run: int = 0
    commands_failed: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Export state as dictionary."""
        return {
            "last_activity": self.last_activity,
            "last_activity_time": (
                self.last_activity_time.isoformat() if self.last_activity_time else None
            ),
            "last_snapshot": self.last_snapshot.to_dict() if self.last_snapshot else None,
            "last_command": self.last_command,
            "last_command_succeeded": self.last_command_succeeded,
            "commands_run": self.commands_run,
            "commands_failed": self.commands_failed,
        }
