"""Benchmark provider implementations package.

This package contains the load-generator providers for framework-bench.
"""

from .base import BenchmarkProvider, ExecutionFailure, ExecutionResult, ExecutionSuccess
from .wrk import WrkBenchmark

__all__ = [
    "BenchmarkProvider",
    "ExecutionFailure",
    "ExecutionResult",
    "ExecutionSuccess",
    "WrkBenchmark",
]

BENCHMARK_PROVIDERS = {
    "wrk": WrkBenchmark,
}
