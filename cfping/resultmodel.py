"""Ranked table of successful connection results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

MAX_DISPLAY_COUNT = 100
UPDATE_INTERVAL_MS = 500

_HEADERS = ("IP地址 (IPv4/IPv6)", "延迟 (毫秒)", "状态")


@dataclass(frozen=True)
class PingResult:
    """Outcome of one connection attempt."""

    ip: str = ""
    latency: float = 0.0
    success: bool = False


def _sort_key(result: PingResult) -> tuple[bool, float]:
    return (not result.success, result.latency if result.success else 0.0)


class PingResultModel:
    """Keeps the fastest successful results, sorted by latency.

    Results are queued by :meth:`add_result` and merged by
    :meth:`process_pending_updates`. When the table grows beyond twice
    *max_display_count* it is cut back to the fastest *max_display_count*.
    """

    def __init__(self, max_display_count: int = MAX_DISPLAY_COUNT) -> None:
        if max_display_count < 1:
            raise ValueError("max_display_count must be at least 1")
        self._max_display_count = max_display_count
        self._results: list[PingResult] = []
        self._pending: list[PingResult] = []

    def add_result(self, result: PingResult) -> None:
        """Queue *result* if it was a success; failures are ignored."""
        if result.success:
            self._pending.append(result)

    def clear(self) -> None:
        """Drop all shown and pending results."""
        self._results.clear()
        self._pending.clear()

    def process_pending_updates(self) -> int:
        """Merge pending results, re-rank them, and return how many were merged."""
        if not self._pending:
            return 0
        added = len(self._pending)
        self._results.extend(self._pending)
        self._pending.clear()
        self._results.sort(key=_sort_key)
        if len(self._results) > self._max_display_count * 2:
            del self._results[self._max_display_count:]
        return added

    def row_count(self) -> int:
        """Number of shown results."""
        return len(self._results)

    def column_count(self) -> int:
        """Number of columns: address, latency and status."""
        return len(_HEADERS)

    def _row(self, row: int) -> PingResult | None:
        if 0 <= row < len(self._results):
            return self._results[row]
        return None

    def data(self, row: int, column: int) -> str | None:
        """Display text of a cell, or None for a cell outside the table."""
        result = self._row(row)
        if result is None:
            return None
        if column == 0:
            return result.ip
        if column == 1:
            return f"{result.latency:.2f}"
        if column == 2:
            return "已连接" if result.success else "失败"
        return None

    def tooltip(self, row: int) -> str | None:
        """Address of a row with its protocol family."""
        result = self._row(row)
        if result is None:
            return None
        protocol = "IPv6" if ":" in result.ip else "IPv4"
        return f"{result.ip} ({protocol})"

    def header_data(self, section: int) -> str | None:
        """Column title, or None for an unknown section."""
        if 0 <= section < len(_HEADERS):
            return _HEADERS[section]
        return None

    def all_ips(self) -> list[str]:
        """Addresses of all shown successful results, fastest first."""
        return [r.ip for r in self._results if r.success]

    def selected_ips(self, rows: Iterable[int]) -> list[str]:
        """Addresses of the given rows, skipping rows outside the table."""
        ips = []
        for row in rows:
            result = self._row(row)
            if result is not None and result.success:
                ips.append(result.ip)
        return ips