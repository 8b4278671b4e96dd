"""Concurrent TCP connection tests over CIDR blocks."""

from __future__ import annotations

import asyncio
import ipaddress
import time
from dataclasses import dataclass
from typing import Callable, Iterable

from .cidrexpander import CidrExpander
from .iputils import calculate_latency
from .resultmodel import PingResult

BATCH_SIZE = 500
DEFAULT_MAX_CONCURRENT_PINGS = 1000
MAX_TIMEOUT_MS = 2000
DEFAULT_PORT = 80

ResultCallback = Callable[[str, float, bool], None]
ProgressCallback = Callable[[int, int], None]
LogCallback = Callable[[str], None]


@dataclass
class PingSettings:
    """Tuning knobs for a test run."""

    thread_count: int = 4
    timeout_ms: int = 1000
    enable_logging: bool = False
    max_concurrent_tasks: int = DEFAULT_MAX_CONCURRENT_PINGS
    port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        if self.max_concurrent_tasks <= 0:
            self.max_concurrent_tasks = DEFAULT_MAX_CONCURRENT_PINGS


async def tcp_ping(address: str, port: int = DEFAULT_PORT,
                   timeout_ms: int = 1000) -> tuple[float, bool]:
    """Try a TCP connection and return ``(latency_ms, success)``."""
    start = time.monotonic()
    try:
        _reader, writer = await asyncio.wait_for(
            asyncio.open_connection(address, port), timeout_ms / 1000.0
        )
    except (OSError, asyncio.TimeoutError):
        return calculate_latency(start, time.monotonic()), False
    latency = calculate_latency(start, time.monotonic())
    writer.close()
    try:
        await writer.wait_closed()
    except OSError:
        pass
    return latency, True


class PingWorker:
    """Runs TCP connection tests for every address of a set of CIDR blocks."""

    def __init__(self, settings: PingSettings | None = None,
                 on_result: ResultCallback | None = None,
                 on_progress: ProgressCallback | None = None,
                 on_log: LogCallback | None = None) -> None:
        self.settings = settings if settings is not None else PingSettings()
        self._on_result = on_result
        self._on_progress = on_progress
        self._on_log = on_log
        self._running = False
        self._stop_requested = False
        self._tasks: set[asyncio.Task] = set()
        self._completed = 0

    @property
    def running(self) -> bool:
        """True while a run is in progress."""
        return self._running

    def _log(self, message: str) -> None:
        if self._on_log is not None:
            self._on_log(message)

    def _emit_result(self, ip: str, latency: float, success: bool) -> None:
        if self._on_result is not None:
            self._on_result(ip, latency, success)

    def _emit_progress(self, current: int, total: int) -> None:
        if self._on_progress is not None:
            self._on_progress(current, total)

    async def run(self, cidr_ranges: Iterable[str]) -> int:
        """Test every address in *cidr_ranges*; return how many tests finished."""
        if self._running:
            return 0
        self._running = True
        self._stop_requested = False
        self._completed = 0

        expander = CidrExpander()
        expander.set_cidr_ranges(list(cidr_ranges))
        total = max(expander.total_count(), 1)
        self._log(
            f"Starting TCP connection test for {total} IP addresses with "
            f"{self.settings.thread_count} threads (IPv4/IPv6 supported)"
        )

        max_tasks = self.settings.max_concurrent_tasks
        slots = asyncio.Semaphore(max_tasks)
        try:
            while not self._stop_requested and expander.has_more():
                batch = expander.next_batch(min(BATCH_SIZE, max_tasks))
                for ip in batch:
                    if self._stop_requested:
                        break
                    await slots.acquire()
                    if self._stop_requested:
                        slots.release()
                        break
                    task = asyncio.create_task(self._ping_counted(ip))
                    self._tasks.add(task)
                    task.add_done_callback(self._tasks.discard)
                    task.add_done_callback(lambda _t: slots.release())
                if self._stop_requested:
                    break
                processed = expander.processed_count()
                self._emit_progress(processed, max(processed, expander.total_count()))
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
        finally:
            for task in list(self._tasks):
                task.cancel()
            self._log("Cleaning up...")
            self._running = False
        return self._completed

    async def _ping_counted(self, ip: str) -> None:
        await self.ping_ip(ip)
        self._completed += 1

    def stop(self) -> None:
        """Ask a running test to stop and cancel outstanding connections."""
        if not self._running or self._stop_requested:
            return
        self._log("Stop request received...")
        self._stop_requested = True
        for task in list(self._tasks):
            task.cancel()

    async def ping_ip(self, ip: str) -> PingResult | None:
        """Test one address and report it; None if the run was stopped."""
        if self._stop_requested:
            return None
        try:
            address = ipaddress.ip_address(ip)
        except ValueError:
            self._emit_result(ip, 0.0, False)
            if self.settings.enable_logging:
                self._log(f"Invalid IP address: {ip}")
            return PingResult(ip, 0.0, False)

        port = self.settings.port
        timeout_ms = min(self.settings.timeout_ms, MAX_TIMEOUT_MS)
        latency, success = await tcp_ping(str(address), port, timeout_ms)
        if self._stop_requested:
            return None

        self._emit_result(ip, latency, success)
        if self.settings.enable_logging:
            if success:
                protocol = "IPv6" if ":" in ip else "IPv4"
                self._log(f"TCP connect {ip} ({protocol}):{port}: {latency:.2f}ms")
            else:
                self._log(f"TCP connect {ip}:{port} timeout")
        return PingResult(ip, latency, success)