"""Structured event logger for the scheduler.

Every event goes to the Home Assistant log as ``EVENT_NAME | key=value``.
When file logging is switched on, events are also written to:
1. a rotating log file (5MB, 3 backups)
2. daily JSON-lines files under ``log/YYYY/MM/DD/events.log``

File I/O happens on a background thread so command runs on the event loop
never block on disk.
"""

from __future__ import annotations

import atexit
import json
import logging
import queue
import threading
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

_LOGGER = logging.getLogger(__name__)

_SHUTDOWN = None


class SchedulerLogger:
    """Event-name logger shared by every component of the integration."""

    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"

    _LEVELS = {
        CRITICAL: logging.CRITICAL,
        ERROR: logging.ERROR,
        WARNING: logging.WARNING,
        INFO: logging.INFO,
        DEBUG: logging.DEBUG,
    }

    def __init__(
        self,
        name: str = "scheduler",
        log_dir: Path | None = None,
        file_logging_enabled: bool = False,
        max_file_size_mb: int = 5,
        backup_count: int = 3,
    ) -> None:
        """Initialize the logger.

        Args:
            name: Logger name, appended to the integration logger namespace
            log_dir: Base directory for file logs (default: component directory/log)
            file_logging_enabled: Start with file logging on
            max_file_size_mb: Max size of the rotating log file
            backup_count: Number of rotated files to keep
        """
        self.name = name
        self.log_dir = log_dir or Path(__file__).parent.parent / "log"
        self._file_logging_enabled = file_logging_enabled
        self._max_bytes = max_file_size_mb * 1024 * 1024
        self._backup_count = backup_count

        self._logger = logging.getLogger(f"custom_components.vehicle_scheduler.{name}")
        self._file_handler: RotatingFileHandler | None = None

        self._write_queue: queue.Queue = queue.Queue()
        self._writer_thread: threading.Thread | None = None

        if file_logging_enabled:
            self._start_writer_thread()

    # ========== Background writer ==========

    def _start_writer_thread(self) -> None:
        if self._writer_thread is not None and self._writer_thread.is_alive():
            return

        self._writer_thread = threading.Thread(
            target=self._writer_loop,
            name="VehicleSchedulerLogWriter",
            daemon=True,
        )
        self._writer_thread.start()
        atexit.register(self.shutdown)

    def shutdown(self) -> None:
        """Stop the writer thread and close the rotating file."""
        if self._writer_thread is None:
            return
        self._write_queue.put(_SHUTDOWN)
        self._writer_thread.join(timeout=2.0)
        self._writer_thread = None

    def _writer_loop(self) -> None:
        self._attach_file_handler()

        while True:
            item = self._write_queue.get()
            if item is _SHUTDOWN:
                break
            try:
                self._append_daily_event(*item)
            except OSError as ex:
                _LOGGER.error("Failed to write scheduler event log: %s", ex)
            finally:
                self._write_queue.task_done()

        if self._file_handler is not None:
            self._logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

    def _attach_file_handler(self) -> None:
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                self.log_dir / "vehicle_scheduler.log",
                maxBytes=self._max_bytes,
                backupCount=self._backup_count,
                encoding="utf-8",
            )
        except OSError as ex:
            _LOGGER.error("Failed to set up scheduler log file: %s", ex)
            return

        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handler.setLevel(logging.DEBUG)
        self._logger.addHandler(handler)
        self._file_handler = handler

    def daily_log_file(self, day: datetime) -> Path:
        """Path of the structured event file for a given day."""
        return self.log_dir / f"{day.year}" / f"{day.month:02d}" / f"{day.day:02d}" / "events.log"

    def _append_daily_event(
        self, event: str, level: str, data: dict[str, Any], timestamp: datetime
    ) -> None:
        log_file = self.daily_log_file(timestamp)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        record = {
            "timestamp": timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3],
            "level": level,
            "event": event,
            "data": data,
        }
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(record, default=str) + "\n")

    # ========== Logging API ==========

    def log(self, level: str, event: str, **data: Any) -> None:
        """Log an event at the given level.

        Args:
            level: One of critical, error, warning, info, debug
            event: Event name (e.g. "WAKE_ATTEMPT", "COMMAND_FINISHED")
            **data: Context rendered as key=value pairs
        """
        message = event
        if data:
            message = f"{event} | " + " | ".join(f"{k}={v}" for k, v in data.items())
        self._logger.log(self._LEVELS.get(level, logging.DEBUG), message)

        if self._file_logging_enabled:
            self._write_queue.put_nowait((event, level, data, datetime.now()))

    def critical(self, event: str, **data: Any) -> None:
        self.log(self.CRITICAL, event, **data)

    def error(self, event: str, **data: Any) -> None:
        self.log(self.ERROR, event, **data)

    def warning(self, event: str, **data: Any) -> None:
        self.log(self.WARNING, event, **data)

    def info(self, event: str, **data: Any) -> None:
        self.log(self.INFO, event, **data)

    def debug(self, event: str, **data: Any) -> None:
        self.log(self.DEBUG, event, **data)

    def separator(self, title: str = "") -> None:
        """Log a visual separator."""
        self.debug(f"{'=' * 20} {title} {'=' * 20}" if title else "=" * 60)

    # ========== File logging control ==========

    def set_file_logging(self, enabled: bool) -> None:
        """Turn file logging on or off."""
        self._file_logging_enabled = enabled
        if enabled:
            self._start_writer_thread()
        else:
            self.shutdown()
        self.info("FILE_LOGGING_CHANGED", enabled=enabled)

    @property
    def file_logging_enabled(self) -> bool:
        return self._file_logging_enabled

    def get_total_size_kb(self) -> float:
        """Total size of all log files in KB.

        Note: blocking I/O, call from an executor when on the event loop.
        """
        if not self.log_dir.exists():
            return 0.0
        total = sum(f.stat().st_size for f in self.log_dir.rglob("*.log"))
        return round(total / 1024, 2)


# Singleton instance
_logger_instance: SchedulerLogger | None = None


def get_logger() -> SchedulerLogger:
    """Get or create the singleton logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = SchedulerLogger()
    return _logger_instance
