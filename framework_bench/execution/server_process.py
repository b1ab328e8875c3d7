"""Server process management for the benchmark harness."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
from pathlib import Path

from ..core.pairing import Pairing

logger = logging.getLogger(__name__)


class ServerProcess:
    """Manages the lifecycle of one server-under-test process.

    This class handles:
    - Starting ``<runtime> <script>`` in its own process group
    - Draining the server's output into a logger
    - Graceful shutdown with SIGKILL escalation
    """

    def __init__(
        self,
        pairing: Pairing,
        servers_dir: Path | str = ".",
        env_vars: dict[str, str] | None = None,
        custom_logger: logging.Logger | None = None,
    ):
        """Initialize the server process manager.

        Args:
            pairing: Pairing whose runtime and script are launched
            servers_dir: Directory containing the server scripts
            env_vars: Extra environment variables for the process
            custom_logger: Logger receiving the server's output
        """
        self.pairing: Pairing = pairing
        # Absolute, since the process is also started with cwd=servers_dir
        self.servers_dir: Path = Path(servers_dir).resolve()
        self.env_vars: dict[str, str] = env_vars or {}
        self.logger: logging.Logger = custom_logger or logger
        self.proc: subprocess.Popen[str] | None = None

        self._logging_thread: threading.Thread | None = None
        self._logging_stop_event: threading.Event = threading.Event()

    @property
    def pid(self) -> int | None:
        return self.proc.pid if self.proc else None

    def build_command(self) -> list[str]:
        return [self.pairing.runtime, str(self.servers_dir / self.pairing.script)]

    def start(self):
        """Start the server process.

        Raises:
            OSError: If the runtime binary cannot be executed
        """
        cmd = self.build_command()
        env = os.environ.copy()
        env.update(self.env_vars)

        self.logger.info(f"Starting server: {' '.join(cmd)}")
        self.proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
            env=env,
            cwd=self.servers_dir,
            start_new_session=True,  # Own process group so children die with it
        )
        self.logger.info(
            f"Started {self.pairing.name} (PID: {self.proc.pid}) "
            f"on port {self.pairing.port}"
        )
        self._start_logging_thread()

    def _start_logging_thread(self):
        """Start background thread to log process output."""
        proc = self.proc

        def log_output():
            if proc.stdout:
                for line in iter(proc.stdout.readline, ""):
                    if self._logging_stop_event.is_set():
                        break
                    if line:
                        self.logger.debug(f"[{self.pairing.runtime} {proc.pid}] {line.rstrip()}")
            else:
                self.logger.warning(f"Unable to read stdout of {proc.pid}")

        self._logging_thread = threading.Thread(target=log_output, daemon=True)
        self._logging_thread.start()

    def is_running(self) -> bool:
        return self.proc is not None and self.proc.poll() is None

    def stop(self, timeout: float = 10):
        """Stop the server and wait until it has exited.

        This method:
        1. Sends SIGTERM to the process group
        2. Waits for graceful shutdown
        3. Forces SIGKILL if timeout exceeded

        Args:
            timeout: Maximum time to wait for graceful shutdown (seconds)
        """
        if self.proc is None:
            return

        self._logging_stop_event.set()

        if not self.is_running():
            self.logger.info(
                f"Server process already terminated with code {self.proc.returncode}"
            )
            self._cleanup()
            return

        self.logger.info(f"Stopping {self.pairing.name} (PID: {self.proc.pid})...")
        try:
            pgid = os.getpgid(self.proc.pid)
            os.killpg(pgid, signal.SIGTERM)
            try:
                self.proc.wait(timeout=timeout)
                self.logger.info("Server process terminated gracefully")
            except subprocess.TimeoutExpired:
                self.logger.warning(
                    f"Server process did not terminate within {timeout}s, "
                    "forcing SIGKILL"
                )
                os.killpg(pgid, signal.SIGKILL)
                self.proc.wait()
                self.logger.info("Server process force killed")
        except ProcessLookupError:
            # Exited between poll() and the signal; reap it
            self.proc.wait()
            self.logger.info("Server process already terminated")
        finally:
            self._cleanup()

    def _cleanup(self):
        """Clean up process resources."""
        if self._logging_thread and self._logging_thread.is_alive():
            self._logging_thread.join(timeout=2)
        if self.proc and self.proc.stdout:
            self.proc.stdout.close()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # pyright: ignore[reportUnknownParameterType, reportMissingParameterType]
        self.stop()
        return False
