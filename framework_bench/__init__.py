"""framework-bench: wrk-based HTTP framework benchmarks across JavaScript runtimes."""

__version__ = "0.1.0"
