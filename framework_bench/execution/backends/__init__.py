"""Process managers for servers under test."""

from .base import ProcessHandle, ProcessManager, SpawnFailure, SpawnResult
from .local_backend import LocalProcessManager

__all__ = [
    "LocalProcessManager",
    "ProcessHandle",
    "ProcessManager",
    "SpawnFailure",
    "SpawnResult",
]
