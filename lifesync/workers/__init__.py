"""Background workers module.

This module provides in-process background worker functionality:
- Alarm scanner (overdue reminder alarms, at most once per reminder)

The scanner is started by the API lifespan, or standalone via
scripts/run_scanner.py.
"""

from lifesync.workers.base import (
    WorkerBase,
    WorkerResult,
    WorkerStatus,
)
from lifesync.workers.alarm_scanner import AlarmScanner, due_alarms, in_alarm_window
from lifesync.workers.runner import ScannerRunner, configure_worker_logging

__all__ = [
    # Base classes
    "WorkerBase",
    "WorkerResult",
    "WorkerStatus",
    # Workers
    "AlarmScanner",
    "due_alarms",
    "in_alarm_window",
    # Runner
    "ScannerRunner",
    "configure_worker_logging",
]
