"""Append-only activity log shared by every command run.

Entries are kept newest first. Appends and reads take the same lock so
concurrent runs never interleave and readers always see a consistent list.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any, Callable

from homeassistant.util import dt as dt_util

from ..models import LogEntry
from ..scheduler_logging import get_logger


class ActivityLog:
    """Timestamped record of command outcomes."""

    def __init__(self, clock: Callable[[], datetime] = dt_util.now) -> None:
        """Initialize the activity log.

        Args:
            clock: Source of entry timestamps
        """
        self._clock = clock
        self._entries: list[LogEntry] = []
        self._lock = threading.Lock()
        self._logger = get_logger()

    def append(self, text: str) -> LogEntry:
        """Add an entry at the top of the log."""
        entry = LogEntry(timestamp=self._clock(), text=text)
        with self._lock:
            self._entries.insert(0, entry)
        self._logger.debug("ACTIVITY", entry=text)
        return entry

    def entries(self, limit: int | None = None) -> list[LogEntry]:
        """Copy of the entries, newest first."""
        with self._lock:
            if limit is None:
                return list(self._entries)
            return self._entries[:limit]

    @property
    def latest(self) -> LogEntry | None:
        with self._lock:
            return self._entries[0] if self._entries else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for storage."""
        return {"entries": [entry.to_dict() for entry in self.entries()]}

    def restore(self, data: dict[str, Any] | None) -> int:
        """Load entries saved by to_dict, below anything already logged.

        Returns:
            Number of entries restored
        """
        if not data:
            return 0
        restored = [LogEntry.from_dict(item) for item in data.get("entries", [])]
        with self._lock:
            self._entries.extend(restored)
        return len(restored)
