"""Benchmark providers and interfaces."""

from .config import BenchmarkConfig
from .parser import WrkOutputParser
from .providers import (
    BenchmarkProvider,
    ExecutionFailure,
    ExecutionResult,
    ExecutionSuccess,
    WrkBenchmark,
)

__all__ = [
    "BenchmarkConfig",
    "BenchmarkProvider",
    "ExecutionFailure",
    "ExecutionResult",
    "ExecutionSuccess",
    "WrkBenchmark",
    "WrkOutputParser",
]
