# cfping

`cfping` takes a list of CIDR ranges, tries a TCP connection to every address in
them (port 80 unless told otherwise), and reports the addresses that answer,
fastest first. It works with both IPv4 and IPv6 ranges. It is useful for finding the
best-responding edge addresses of a CDN from where you are.

## Installation

```
pip install .
```

It needs Python 3.10 or newer and nothing outside the standard library.

## Command line

```
cfping 104.16.0.0/13 108.162.192.0/18
cfping -f ranges.txt -o results.txt
```

Ranges are given as arguments or, with `-f/--file`, in a text file with one range
per line. Blank lines and lines that start with `#` are skipped:

```
# IPv4 example
104.16.0.0/13
104.24.0.0/14
108.162.192.0/18
```

With neither arguments nor a file, the three ranges above are tested.

Options (see `cfping --help`):

| Option | Meaning | Default |
| --- | --- | --- |
| `-f`, `--file` | read ranges from a file | |
| `-t`, `--threads` | thread count, 1–16; only reported in the log, the connections all run on one asyncio event loop | 4 |
| `--timeout` | timeout per connection in milliseconds, 10–5000; values above 2000 are treated as 2000 | 500 |
| `-c`, `--concurrent` | most connection attempts in flight at once, 10–10000 | 500 |
| `-p`, `--port` | target port, 1–65535 | 80 |
| `-v`, `--verbose` | per-address log lines; the most recent 100 log lines are printed to standard error after the run | off |
| `-o`, `--output` | save the reachable addresses to this file | |

When the run ends, a progress line `IP地址: <done> / <total>` goes to standard error,
and each reachable address is printed to standard output with its latency in
milliseconds, separated by a tab, fastest first. The result table is trimmed back to
the fastest 100 whenever it grows past 200 entries, so at most 200 are listed. A saved
results file begins with two `#` comment lines and then has one address per line,
fastest first; if nothing was reached, nothing is saved and a message says so.

Ranges that do not parse are ignored. An IPv6 range of /64 or wider is counted as
1,000,000 addresses, so a run over one stops after that many. Pressing Ctrl-C
interrupts the run and exits with status 130.

## Library use

```python
from cfping.iputils import expand_cidr, cidr_ip_count
from cfping.cidrexpander import CidrExpander

expand_cidr("192.168.1.0/30", -1)
# ['192.168.1.0', '192.168.1.1', '192.168.1.2', '192.168.1.3']

cidr_ip_count("10.0.0.0/24")   # 256

expander = CidrExpander(None)
expander.set_cidr_ranges(["10.0.0.0/30", "10.0.1.0/31"])
while expander.has_more():
    batch = expander.next_batch(1000)
```

To run a whole test from Python, use `PingSession` from `cfping.app` with a
`PingSettings` from `cfping.pingworker`. `PingSession.run` is a coroutine and returns
the reachable addresses, fastest first; `PingSession.stop` asks a running test to
stop:

```python
import asyncio
from pathlib import Path

from cfping.app import PingSession, parse_cidr_text
from cfping.pingworker import PingSettings

session = PingSession(PingSettings(timeout_ms=500, port=443))
ranges = parse_cidr_text(Path("ranges.txt").read_text(encoding="utf-8"))
fastest = asyncio.run(session.run(ranges))
```

`PingWorker` in `cfping.pingworker` does the asynchronous connection attempts and
reports each result, its progress and its log lines through callbacks. `tcp_ping` in
the same module makes a single connection attempt and returns the latency in
milliseconds and whether it succeeded. `PingResultModel` in `cfping.resultmodel`
keeps the fastest successful results, and `LogModel` in `cfping.logmodel` keeps the
most recent log lines. `save_results`, `progress_percentage` and `format_progress` in
`cfping.app` are the helpers the command uses for its output.

## What it does not do

`cfping` is a command-line tool and library only: it has no graphical window, does
not copy results to the clipboard, and does not show progress while a run is still
going; progress and results are printed once the run has finished.

## Tests

```
pip install .[test]
pytest
```