"""Hadith Master daemon for the daily schedule rotation.

This module provides:
- Background scheduler that fills in tomorrow's schedule row once a day
- Daemon server for running as a background process
"""

from .scheduler import SCHEDULE_TOMORROW_JOB, DailyScheduler
from .server import DaemonInfo, DaemonServer, DaemonStatus

__all__ = [
    # Scheduler
    "DailyScheduler",
    "SCHEDULE_TOMORROW_JOB",
    # Server
    "DaemonServer",
    "DaemonInfo",
    "DaemonStatus",
]
