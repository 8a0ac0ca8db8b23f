"""Unified logging module for Vehicle Command Scheduler."""

from .unified_logger import SchedulerLogger, get_logger

__all__ = ["SchedulerLogger", "get_logger"]
