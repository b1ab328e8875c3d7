"""Core components for framework-bench."""

from .exceptions import BenchmarkError, EmptyAggregationError
from .pairing import DEFAULT_PAIRINGS, Pairing
from .results import AggregatedResult, BenchmarkResult, RuntimeComparison
from .system import SystemInfo, collect_system_info, tool_version

__all__ = [
    "AggregatedResult",
    "BenchmarkError",
    "BenchmarkResult",
    "DEFAULT_PAIRINGS",
    "EmptyAggregationError",
    "Pairing",
    "RuntimeComparison",
    "SystemInfo",
    "collect_system_info",
    "tool_version",
]
