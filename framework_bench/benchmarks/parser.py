"""Parser for the plain-text report printed by wrk.

wrk has no machine-readable output, so the report is scanned line by line and
every line is offered to every pattern in a dispatch table. Lines that match
nothing are ignored and metrics that never match stay at zero, which keeps a
report without ``--latency`` percentiles (or without error lines) usable.

Example report::

    Running 30s test @ http://localhost:3000
      12 threads and 100 connections
      Thread Stats   Avg      Stdev     Max   +/- Stdev
        Latency     5.12ms    2.31ms  45.67ms   85.32%
        Req/Sec     1.65k   210.45     2.10k    70.12%
      Latency Distribution
         50%    4.80ms
         75%    6.10ms
         90%    7.90ms
         99%   12.34ms
      591234 requests in 30.03s, 120.45MB read
      Socket errors: connect 0, read 12, write 0, timeout 3
      Non-2xx or 3xx responses: 5
    Requests/sec:  19687.45
    Transfer/sec:      4.01MB
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable

from ..core.results import BenchmarkResult

logger = logging.getLogger(__name__)

# Power of 1024 for a wrk transfer unit
TRANSFER_UNITS: dict[str, int] = {
    "B": 0,
    "KB": 1,
    "MB": 2,
    "GB": 3,
}

TRACKED_PERCENTILES: dict[int, str] = {
    50: "p50_latency",
    75: "p75_latency",
    90: "p90_latency",
    99: "p99_latency",
}


def to_milliseconds(value: float, unit: str) -> float:
    """Convert a wrk latency value to milliseconds; unknown units pass through."""
    if unit == "us":
        return value / 1000.0
    if unit == "s":
        return value * 1000.0
    if unit != "ms":
        logger.debug(f"Unknown latency unit {unit!r}, keeping raw value {value}")
    return value


def to_bytes(value: float, unit: str) -> float:
    """Convert a wrk transfer rate such as ``4.01MB`` to bytes."""
    return value * 1024 ** TRANSFER_UNITS[unit]


Handler = Callable[[re.Match[str], dict[str, Any]], None]


def _requests_per_second(match: re.Match[str], fields: dict[str, Any]) -> None:
    fields["requests_per_second"] = float(match.group(1))


def _transfer(match: re.Match[str], fields: dict[str, Any]) -> None:
    fields["throughput"] = to_bytes(float(match.group(1)), match.group(2))


def _total_requests(match: re.Match[str], fields: dict[str, Any]) -> None:
    fields["total_requests"] = int(match.group(1))


def _latency_summary(match: re.Match[str], fields: dict[str, Any]) -> None:
    # Avg, Stdev, Max, +/- Stdev: the stdev columns are not used
    fields["avg_latency"] = to_milliseconds(float(match.group(1)), match.group(2))
    fields["max_latency"] = to_milliseconds(float(match.group(5)), match.group(6))


def _percentile(match: re.Match[str], fields: dict[str, Any]) -> None:
    name = TRACKED_PERCENTILES.get(int(match.group(1)))
    if name is None:
        return
    fields[name] = to_milliseconds(float(match.group(2)), match.group(3))


def _socket_errors(match: re.Match[str], fields: dict[str, Any]) -> None:
    connect, read, write, timeout = (int(g) for g in match.groups())
    fields["socket_errors"] = connect + read + write
    fields["timeouts"] = timeout


def _non_2xx(match: re.Match[str], fields: dict[str, Any]) -> None:
    fields["non_2xx_responses"] += int(match.group(1))


_VALUE_UNIT = r"([0-9.]+)([a-zA-Z]+)"

DISPATCH_TABLE: list[tuple[re.Pattern[str], Handler]] = [
    (re.compile(r"Requests/sec:\s+([0-9.]+)"), _requests_per_second),
    (re.compile(r"Transfer/sec:\s+([0-9.]+)([KMG]?B)\b"), _transfer),
    (re.compile(r"(\d+) requests in"), _total_requests),
    (
        re.compile(
            rf"Latency\s+{_VALUE_UNIT}\s+{_VALUE_UNIT}\s+{_VALUE_UNIT}\s+([0-9.]+)%"
        ),
        _latency_summary,
    ),
    (re.compile(r"^\s*(\d+)%\s+([0-9.]+)([a-zA-Z]+)"), _percentile),
    (
        re.compile(
            r"Socket errors: connect (\d+), read (\d+), write (\d+), timeout (\d+)"
        ),
        _socket_errors,
    ),
    (re.compile(r"Non-2xx or 3xx responses: (\d+)"), _non_2xx),
]


class WrkOutputParser:
    """Turns a raw wrk report into a BenchmarkResult."""

    def __init__(
        self,
        dispatch_table: list[tuple[re.Pattern[str], Handler]] | None = None,
    ):
        self.dispatch_table = dispatch_table or DISPATCH_TABLE

    def parse(self, output: str) -> BenchmarkResult:
        fields: dict[str, Any] = {
            "requests_per_second": 0.0,
            "avg_latency": 0.0,
            "max_latency": 0.0,
            "p50_latency": 0.0,
            "p75_latency": 0.0,
            "p90_latency": 0.0,
            "p99_latency": 0.0,
            "throughput": 0.0,
            "total_requests": 0,
            "timeouts": 0,
            "socket_errors": 0,
            "non_2xx_responses": 0,
        }
        matched = 0
        for line in output.splitlines():
            for pattern, handler in self.dispatch_table:
                match = pattern.search(line)
                if match:
                    handler(match, fields)
                    matched += 1

        if matched == 0:
            logger.warning("No recognizable wrk metrics found in output")

        # Summed after the scan so the total does not depend on line order
        errors = fields["socket_errors"] + fields["timeouts"] + fields["non_2xx_responses"]
        return BenchmarkResult(errors=errors, raw_output=output, **fields)
