"""Controllers sequencing benchmark runs."""

from .orchestrator import BenchmarkOrchestrator, RunState
from .run_loggers import RunLoggers

__all__ = [
    "BenchmarkOrchestrator",
    "RunLoggers",
    "RunState",
]
