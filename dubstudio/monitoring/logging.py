"""
Debug log capture for DubStudio.

Package modules log through the standard ``logging`` module. LogStore is a
handler that keeps those records in memory for the lifetime of the
process, so a session's log can be exported as a text report when a user
hits a problem.
"""

from __future__ import annotations

import json
import logging
import threading
import time
import traceback
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

PACKAGE_LOGGER = "dubstudio"

# Attributes present on every LogRecord; anything else came in via extra=
_STANDARD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


@dataclass
class LogEntry:
    """A captured log record.

    Attributes:
        timestamp: ISO-8601 UTC timestamp.
        level: Level name (ERROR, WARNING, INFO, DEBUG).
        message: Formatted message.
        logger_name: Name of the emitting logger.
        stack: Formatted traceback, if the record carried one.
        context: Fields passed through ``extra=``.
    """

    timestamp: str
    level: str
    message: str
    logger_name: str = ""
    stack: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)

    def to_text(self) -> str:
        context = json.dumps(self.context or {}, indent=2, default=str)
        return (
            f"[{self.timestamp}] [{self.level}] {self.message}\n"
            f"Stack: {self.stack or 'N/A'}\n"
            f"Context: {context}\n"
            f"{'-' * 80}\n"
        )


class LogStore(logging.Handler):
    """In-memory log handler with text export.

    Example:
        store = configure_logging("DEBUG")
        ...
        store.save("dubstudio_debug.txt")
    """

    def __init__(self, level: int = logging.DEBUG, max_entries: int | None = 10000):
        super().__init__(level)
        self._entries: list[LogEntry] = []
        self._max_entries = max_entries
        self._store_lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = self._to_entry(record)
        except Exception:
            self.handleError(record)
            return

        with self._store_lock:
            self._entries.append(entry)
            if self._max_entries and len(self._entries) > self._max_entries:
                del self._entries[: len(self._entries) - self._max_entries]

    def _to_entry(self, record: logging.LogRecord) -> LogEntry:
        stack = None
        if record.exc_info and record.exc_info[1] is not None:
            stack = "".join(traceback.format_exception(*record.exc_info)).rstrip()

        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }

        return LogEntry(
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            level=record.levelname,
            message=record.getMessage(),
            logger_name=record.name,
            stack=stack,
            context=context,
        )

    def entries(self, level: str | None = None) -> list[LogEntry]:
        """Captured entries, optionally only those of one level."""
        with self._store_lock:
            entries = list(self._entries)
        if level:
            entries = [e for e in entries if e.level == level.upper()]
        return entries

    def clear(self) -> None:
        with self._store_lock:
            self._entries.clear()

    def export_text(self) -> str:
        return "\n".join(entry.to_text() for entry in self.entries())

    def export_json(self) -> str:
        return json.dumps([e.to_dict() for e in self.entries()], indent=2, default=str)

    def save(self, path: Path | str | None = None) -> Path:
        """Write the text report. Defaults to dubstudio_debug_<ms>.txt."""
        path = Path(path or f"dubstudio_debug_{int(time.time() * 1000)}.txt")
        path.write_text(self.export_text(), encoding="utf-8")
        return path


# Global store instance
_global_store: LogStore | None = None


def configure_logging(
    level: int | str = logging.INFO,
    store: LogStore | None = None,
    console: bool = True,
) -> LogStore:
    """Configure the package logger.

    Args:
        level: Minimum level for the package logger.
        store: Store to attach (a new one by default).
        console: Also log to stderr.

    Returns:
        The attached LogStore.
    """
    global _global_store

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if _global_store is not None and _global_store is not store:
        logger.removeHandler(_global_store)

    _global_store = store or LogStore()
    if _global_store not in logger.handlers:
        logger.addHandler(_global_store)

    if console and not any(getattr(h, "_dubstudio_console", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        handler._dubstudio_console = True
        logger.addHandler(handler)

    return _global_store


def get_log_store() -> LogStore:
    """Get the global store, attaching one to the package logger if needed."""
    global _global_store

    if _global_store is None:
        _global_store = LogStore()
        logging.getLogger(PACKAGE_LOGGER).addHandler(_global_store)

    return _global_store
