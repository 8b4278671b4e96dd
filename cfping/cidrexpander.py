"""Lazy expansion of CIDR blocks into batches of address strings."""

from __future__ import annotations

import ipaddress
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterable

from . import iputils

IPV6_COUNT_CAP = 1_000_000
DEFAULT_BATCH_SIZE = 1000

ProgressCallback = Callable[[int, int], None]


@dataclass
class _CidrRange:
    version: int
    current: int
    end: int
    cidr: str

    @property
    def exhausted(self) -> bool:
        return self.current > self.end

    def address_text(self) -> str:
        return iputils.ip_to_string(ipaddress.ip_address(self.current) if self.version == 4
                                    else ipaddress.IPv6Address(self.current))


class CidrExpander:
    """Walks a queue of CIDR blocks, handing out addresses in batches."""

    def __init__(self, on_progress: ProgressCallback | None = None) -> None:
        self._on_progress = on_progress
        self._ranges: deque[_CidrRange] = deque()
        self._total = 0
        self._processed = 0

    def set_cidr_ranges(self, cidr_ranges: Iterable[str]) -> None:
        """Replace the queued blocks; invalid entries are skipped."""
        self._ranges.clear()
        self._total = 0
        self._processed = 0
        for cidr in cidr_ranges:
            if not iputils.is_valid_cidr(cidr):
                continue
            count = iputils.cidr_ip_count(cidr)
            if count is None:
                count = IPV6_COUNT_CAP
            elif count == 0:
                continue
            start, end = iputils.cidr_to_range(cidr)
            self._ranges.append(_CidrRange(start.version, int(start), int(end), cidr))
            self._total += count

    def has_more(self) -> bool:
        """Return True while blocks remain in the queue."""
        return bool(self._ranges)

    def next_batch(self, batch_size: int = DEFAULT_BATCH_SIZE) -> list[str]:
        """Return up to *batch_size* further addresses."""
        batch: list[str] = []
        while len(batch) < batch_size and self._ranges:
            block = self._ranges[0]
            while len(batch) < batch_size and not block.exhausted:
                batch.append(block.address_text())
                block.current += 1
                self._processed += 1
                if self._processed >= self._total:
                    break
            if block.exhausted or self._processed >= self._total:
                self._ranges.popleft()
            if self._processed >= self._total:
                break
        if batch and self._on_progress is not None:
            self._on_progress(self._processed, self._total)
        return batch

    def total_count(self) -> int:
        """Number of addresses across all queued blocks."""
        return self._total

    def processed_count(self) -> int:
        """Number of addresses handed out so far."""
        return self._processed