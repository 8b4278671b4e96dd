"""A bounded, thread-safe log of timestamped messages laid out as a table."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime

MAX_LOG_COUNT = 100
UPDATE_INTERVAL_MS = 200

_HEADERS = ("时间", "日志消息")


@dataclass(frozen=True)
class LogEntry:
    """One log line and the moment it was recorded."""

    message: str = ""
    timestamp: datetime = field(default_factory=datetime.now)


class LogModel:
    """Collects log messages from any thread and publishes them in batches.

    Messages go to a pending queue first; :meth:`process_pending_updates`
    moves them into the visible log, keeping only the newest
    *max_log_count* entries.
    """

    def __init__(self, max_log_count: int = MAX_LOG_COUNT) -> None:
        if max_log_count < 1:
            raise ValueError("max_log_count must be at least 1")
        self._max_log_count = max_log_count
        self._logs: list[LogEntry] = []
        self._pending: list[LogEntry] = []
        self._lock = threading.Lock()

    def add_log_message(self, message: str) -> None:
        """Queue *message*; safe to call from any thread."""
        with self._lock:
            self._pending.append(LogEntry(message))

    def clear(self) -> None:
        """Drop both the visible and the pending entries."""
        self._logs.clear()
        with self._lock:
            self._pending.clear()

    def process_pending_updates(self) -> int:
        """Move pending entries into the log and return how many were taken."""
        with self._lock:
            new_logs, self._pending = self._pending, []
        if not new_logs:
            return 0
        self._logs.extend(new_logs)
        excess = len(self._logs) - self._max_log_count
        if excess > 0:
            del self._logs[:excess]
        return len(new_logs)

    def row_count(self) -> int:
        """Number of visible entries."""
        return len(self._logs)

    def column_count(self) -> int:
        """Number of columns: time and message."""
        return len(_HEADERS)

    def data(self, row: int, column: int) -> str | None:
        """Display text of a cell, or None for a cell outside the table."""
        if not 0 <= row < len(self._logs):
            return None
        entry = self._logs[row]
        if column == 0:
            return entry.timestamp.strftime("%H:%M:%S")
        if column == 1:
            return entry.message
        return None

    def header_data(self, section: int) -> str | None:
        """Column title, or None for an unknown section."""
        if 0 <= section < len(_HEADERS):
            return _HEADERS[section]
        return None

    def entries(self) -> list[LogEntry]:
        """A copy of the visible entries, oldest first."""
        return list(self._logs)