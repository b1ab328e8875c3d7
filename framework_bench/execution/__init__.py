"""Execution of servers under test and benchmark orchestration."""

from .backends import LocalProcessManager, ProcessHandle, ProcessManager, SpawnFailure
from .controllers.orchestrator import BenchmarkOrchestrator
from .server_process import ServerProcess

__all__ = [
    "BenchmarkOrchestrator",
    "LocalProcessManager",
    "ProcessHandle",
    "ProcessManager",
    "ServerProcess",
    "SpawnFailure",
]
