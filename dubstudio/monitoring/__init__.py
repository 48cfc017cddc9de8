"""
Monitoring for DubStudio.

Components:
    LogStore          - In-memory log handler with text/JSON export
    LogEntry          - A captured record
    configure_logging - Attach a LogStore (and console output) to the package logger

Example:
    from dubstudio.monitoring import configure_logging

    store = configure_logging("DEBUG")
    ...
    store.save("debug.txt")
"""

from dubstudio.monitoring.logging import (
    LogEntry,
    LogStore,
    configure_logging,
    get_log_store,
)

__all__ = [
    "LogEntry",
    "LogStore",
    "configure_logging",
    "get_log_store",
]
