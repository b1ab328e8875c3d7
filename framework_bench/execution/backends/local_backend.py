"""Native process manager using subprocesses on the local machine."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

import requests
from typing_extensions import override

from ...core.pairing import Pairing
from ..server_process import ServerProcess
from .base import ManagedProcesses, ProcessHandle, ProcessManager, SpawnFailure, SpawnResult

logger = logging.getLogger(__name__)

PRODUCTION_ENV = {"NODE_ENV": "production"}


class LocalProcessManager(ProcessManager):
    """Runs servers as child processes of the harness."""

    def __init__(
        self,
        servers_dir: Path | str = ".",
        env_vars: dict[str, str] | None = None,
        probe_timeout: float = 1.0,
        shutdown_timeout: float = 10.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(sleep=sleep)
        self.servers_dir: Path = Path(servers_dir)
        self.env_vars: dict[str, str] = {**PRODUCTION_ENV, **(env_vars or {})}
        self.probe_timeout: float = probe_timeout
        self.shutdown_timeout: float = shutdown_timeout
        self._processes: ManagedProcesses = ManagedProcesses()

    @override
    def spawn(self, pairing: Pairing) -> SpawnResult:
        server = ServerProcess(
            pairing,
            servers_dir=self.servers_dir,
            env_vars=self.env_vars,
            custom_logger=self._logger,
        )
        try:
            server.start()
        except OSError as e:
            self._logger.error(f"Failed to start server for {pairing.name}: {e}")
            return SpawnFailure(pairing, str(e))

        handle = ProcessHandle(pairing=pairing, pid=server.pid, process=server)
        self._processes.add(handle)
        return handle

    @override
    def probe_liveness(self, port: int) -> bool:
        url = f"http://localhost:{port}/"
        try:
            response = requests.get(
                url, timeout=(self.probe_timeout, self.probe_timeout)
            )
        except requests.exceptions.RequestException as e:
            self._logger.debug(f"Health check failed: {e}")
            return False
        if not response.ok:
            self._logger.debug(
                f"Health check returned status {response.status_code} for {url}"
            )
        return response.ok

    @override
    def terminate(self, handle: ProcessHandle):
        if not self._processes.remove(handle):
            self._logger.warning(
                f"Process {handle.pid} for {handle.pairing.name} already terminated"
            )
            return
        server: ServerProcess = handle.process
        server.stop(timeout=self.shutdown_timeout)
        self._logger.info(
            f"Stopped {handle.pairing.name} after {time.time() - handle.started_at:.1f}s"
        )

    @override
    def cleanup_all(self):
        """Terminate any server whose run did not reach its own cleanup."""
        leftovers = list(self._processes.live.values())
        if not leftovers:
            self._logger.debug("No server processes left to clean up")
            return
        for handle in leftovers:
            self._logger.warning(
                f"Cleaning up leftover server {handle.pairing.name} (PID: {handle.pid})"
            )
            self.terminate(handle)
