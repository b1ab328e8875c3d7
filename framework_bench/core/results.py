"""Result records produced by runs, aggregation and runtime comparison."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BenchmarkResult:
    """Metrics parsed from a single load-generator report.

    Latencies are in milliseconds and throughput in bytes per second. Any
    metric whose line was missing from the report stays at zero.
    """

    requests_per_second: float = 0.0
    avg_latency: float = 0.0
    max_latency: float = 0.0
    p50_latency: float = 0.0
    p75_latency: float = 0.0
    p90_latency: float = 0.0
    p99_latency: float = 0.0
    throughput: float = 0.0
    total_requests: int = 0
    # socket_errors + timeouts + non_2xx_responses
    errors: int = 0
    timeouts: int = 0
    socket_errors: int = 0
    non_2xx_responses: int = 0
    raw_output: str = field(default="", repr=False)


@dataclass(frozen=True)
class AggregatedResult:
    """Statistics for one pairing across all of its successful runs."""

    environment: str
    runtime: str
    framework: str
    port: int
    requests_per_second: float
    std_rps: float
    avg_latency: float
    std_latency: float
    p50_latency: float
    p90_latency: float
    p99_latency: float
    throughput: float
    total_requests: int
    errors: int
    timeouts: int
    non_2xx_responses: int
    runs: int
    raw_runs: tuple[BenchmarkResult, ...] = field(default=(), repr=False)

    def __post_init__(self):
        if self.runs != len(self.raw_runs):
            raise ValueError(
                f"Run count {self.runs} does not match "
                f"{len(self.raw_runs)} retained results"
            )

    @property
    def throughput_mb(self) -> float:
        return self.throughput / 1024 / 1024


@dataclass(frozen=True)
class RuntimeComparison:
    """Relative performance of two runtimes hosting the same framework."""

    framework: str
    baseline: AggregatedResult
    candidate: AggregatedResult
    rps_improvement: float
    latency_improvement: float
