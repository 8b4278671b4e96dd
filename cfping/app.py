"""Command-line front end: load CIDR blocks, test them and report the fastest addresses."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Iterable, Sequence

from .logmodel import LogModel
from .pingworker import DEFAULT_PORT, PingSettings, PingWorker
from .resultmodel import PingResult, PingResultModel

DEFAULT_CIDR_TEXT = (
    "# 输入CIDR地址段 (每行一个)\n"
    "# IPv4示例:\n"
    "104.16.0.0/13\n"
    "104.24.0.0/14\n"
    "108.162.192.0/18"
)

RESULTS_HEADER = (
    "# CloudFlare CDN IP TCP连接测试结果\n"
    "# 按延迟排序的成功连接IP地址\n"
)

NO_RANGES_MESSAGE = "请至少输入一个CIDR地址段。"
NO_RESULTS_MESSAGE = "没有结果可保存。"


def parse_cidr_text(text: str) -> list[str]:
    """Return the non-empty, non-comment lines of *text*, stripped."""
    ranges = []
    for line in text.split("\n"):
        trimmed = line.strip()
        if trimmed and not trimmed.startswith("#"):
            ranges.append(trimmed)
    return ranges


def progress_percentage(completed: int, total: int) -> int:
    """Whole percentage of *completed* out of *total*, capped at 100."""
    if total <= 0:
        return 0
    return max(0, min(100, (completed * 100) // total))


def format_progress(completed: int, total: int) -> str:
    """Progress line shown while a test runs."""
    return f"IP地址: {completed} / {total}"


def save_results(path: str | Path, ips: Iterable[str]) -> int:
    """Write *ips* to *path* under a comment header and return how many were written."""
    addresses = list(ips)
    if not addresses:
        raise ValueError(NO_RESULTS_MESSAGE)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(RESULTS_HEADER)
        for ip in addresses:
            handle.write(f"{ip}\n")
    return len(addresses)


class PingSession:
    """One test run with its ranked results and its log."""

    def __init__(self, settings: PingSettings | None = None) -> None:
        self.settings = settings if settings is not None else PingSettings()
        self.results = PingResultModel()
        self.log = LogModel()
        self.completed = 0
        self.total = 0
        self._worker: PingWorker | None = None

    @property
    def running(self) -> bool:
        """True while a test is in progress."""
        return self._worker is not None and self._worker.running

    @property
    def percentage(self) -> int:
        """Current progress in whole percent."""
        return progress_percentage(self.completed, self.total)

    def _on_result(self, ip: str, latency: float, success: bool) -> None:
        self.results.add_result(PingResult(ip, latency, success))
        self.completed += 1

    def _on_progress(self, current: int, total: int) -> None:
        self.total = total
        self.completed = min(current, total)
        self.results.process_pending_updates()

    async def run(self, cidr_ranges: Iterable[str]) -> list[str]:
        """Test every address of *cidr_ranges*; return the reachable ones, fastest first."""
        ranges = list(cidr_ranges)
        if not ranges:
            raise ValueError(NO_RANGES_MESSAGE)
        if self.running:
            raise RuntimeError("a test is already running")

        self.completed = 0
        self.total = 0
        self.results.clear()
        self.log.clear()

        worker = PingWorker(
            self.settings,
            on_result=self._on_result,
            on_progress=self._on_progress,
            on_log=self.log.add_log_message,
        )
        self._worker = worker
        self.log.add_log_message(f"开始TCP连接测试 (端口{self.settings.port})...")
        try:
            await worker.run(ranges)
        finally:
            self._worker = None
            self.results.process_pending_updates()
            self.log.add_log_message("测试已完成。")
            self.log.process_pending_updates()
        return self.results.all_ips()

    def stop(self) -> bool:
        """Ask a running test to stop; return False if nothing was running."""
        worker = self._worker
        if worker is None or not worker.running:
            return False
        self.log.add_log_message("收到停止请求，正在停止测试...")
        worker.stop()
        return True


def _bounded_int(low: int, high: int):
    def parse(text: str) -> int:
        try:
            value = int(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
        if not low <= value <= high:
            raise argparse.ArgumentTypeError(f"must be between {low} and {high}")
        return value

    return parse


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cfping",
        description="CloudFlare CDN IP TCP连接测试工具",
    )
    parser.add_argument("cidrs", nargs="*", help="CIDR地址段")
    parser.add_argument("-f", "--file", help="从文件加载CIDR地址段 (每行一个)")
    parser.add_argument("-t", "--threads", type=_bounded_int(1, 16), default=4,
                        help="线程数量 (1-16)")
    parser.add_argument("--timeout", type=_bounded_int(10, 5000), default=500,
                        help="超时时间 (毫秒, 10-5000)")
    parser.add_argument("-c", "--concurrent", type=_bounded_int(10, 10000), default=500,
                        help="最大并发任务 (10-10000)")
    parser.add_argument("-p", "--port", type=_bounded_int(1, 65535), default=DEFAULT_PORT,
                        help="目标端口")
    parser.add_argument("-v", "--verbose", action="store_true", help="启用详细日志")
    parser.add_argument("-o", "--output", help="保存结果到文件")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run a test from the command line and print the fastest addresses."""
    args = _build_parser().parse_args(argv)

    text = "\n".join(args.cidrs)
    if args.file:
        try:
            text = Path(args.file).read_text(encoding="utf-8")
        except OSError:
            print("无法打开文件。", file=sys.stderr)
            return 1
    elif not args.cidrs:
        text = DEFAULT_CIDR_TEXT

    ranges = parse_cidr_text(text)
    if not ranges:
        print(NO_RANGES_MESSAGE, file=sys.stderr)
        return 1

    settings = PingSettings(
        thread_count=args.threads,
        timeout_ms=args.timeout,
        enable_logging=args.verbose,
        max_concurrent_tasks=args.concurrent,
        port=args.port,
    )
    session = PingSession(settings)
    try:
        asyncio.run(session.run(ranges))
    except KeyboardInterrupt:
        print("已中断。", file=sys.stderr)
        return 130

    if args.verbose:
        for entry in session.log.entries():
            print(f"{entry.timestamp:%H:%M:%S} {entry.message}", file=sys.stderr)

    print(format_progress(session.completed, session.total), file=sys.stderr)
    for row in range(session.results.row_count()):
        print(f"{session.results.data(row, 0)}\t{session.results.data(row, 1)}")

    if args.output:
        try:
            count = save_results(args.output, session.results.all_ips())
        except ValueError as exc:
            print(exc, file=sys.stderr)
        except OSError:
            print("无法保存文件。", file=sys.stderr)
            return 1
        else:
            print(f"结果已保存到: {args.output} ({count}个IP)", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())