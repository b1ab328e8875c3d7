"""Exceptions raised inside the benchmark harness."""


class BenchmarkError(RuntimeError):
    pass


class EmptyAggregationError(BenchmarkError):
    """Raised when a pairing has no successful runs to aggregate."""
