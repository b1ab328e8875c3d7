"""Process manager abstractions for native and test execution."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Union

from ...core.pairing import Pairing

logger = logging.getLogger(__name__)


@dataclass
class ProcessHandle:
    """Handle for a spawned server process."""

    pairing: Pairing
    pid: int | None = None
    process: Any = None  # Backend-specific process object
    started_at: float = 0.0

    def __post_init__(self):
        if self.started_at == 0.0:
            self.started_at = time.time()


@dataclass(frozen=True)
class SpawnFailure:
    """A server process that could not be created."""

    pairing: Pairing
    reason: str


SpawnResult = Union[ProcessHandle, SpawnFailure]


class ProcessManager(ABC):
    """Abstract process manager - spawns, probes and stops servers under test."""

    def __init__(self, sleep: Callable[[float], None] = time.sleep):
        self._sleep: Callable[[float], None] = sleep
        self._logger: logging.Logger = logger

    def set_logger(self, custom_logger: logging.Logger):
        """Set the logger used for process lifecycle and server output."""
        self._logger = custom_logger

    @abstractmethod
    def spawn(self, pairing: Pairing) -> SpawnResult:
        """Start the pairing's server. Failures are returned, never retried."""
        pass

    @abstractmethod
    def probe_liveness(self, port: int) -> bool:
        """Return True if the server on ``port`` answers with a non-error response."""
        pass

    @abstractmethod
    def terminate(self, handle: ProcessHandle):
        """Stop the process and block until it has exited."""
        pass

    def cleanup_all(self):
        """Force cleanup of any process still alive (no-op by default)."""
        pass

    def wait_until_ready(
        self, port: int, max_attempts: int = 20, interval: float = 0.5
    ) -> bool:
        """Poll ``probe_liveness`` until it succeeds or attempts run out.

        Returns:
            True once the server answers, False if every attempt failed
        """
        for attempt in range(1, max_attempts + 1):
            if self.probe_liveness(port):
                self._logger.info(
                    f"Server on port {port} ready after {attempt} attempt(s)"
                )
                return True
            self._logger.debug(
                f"Health check {attempt}/{max_attempts} failed for port {port}"
            )
            if attempt < max_attempts:
                self._sleep(interval)

        self._logger.error(
            f"Server on port {port} not ready after {max_attempts} attempts"
        )
        return False


@dataclass
class ManagedProcesses:
    """Book-keeping of live handles so every spawn is matched by one terminate."""

    live: dict[int, ProcessHandle] = field(default_factory=dict)

    def add(self, handle: ProcessHandle):
        self.live[id(handle)] = handle

    def remove(self, handle: ProcessHandle) -> bool:
        return self.live.pop(id(handle), None) is not None
