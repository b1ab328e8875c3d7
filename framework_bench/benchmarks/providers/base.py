"""Abstract benchmark provider base class."""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union

from ...core.results import BenchmarkResult
from ..config import BenchmarkConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionSuccess:
    """Output captured from a completed load-generator invocation."""

    output: str
    returncode: int = 0


@dataclass(frozen=True)
class ExecutionFailure:
    """Load-generator invocation that could not produce a report."""

    reason: str


ExecutionResult = Union[ExecutionSuccess, ExecutionFailure]


class BenchmarkProvider(ABC):
    """Abstract benchmark provider interface.

    Providers wrap an external load generator: they build its command line,
    run it to completion and turn its report into a BenchmarkResult. Launch
    problems are returned as ExecutionFailure values rather than raised.
    """

    name: str = "benchmark"

    def __init__(self, custom_logger: logging.Logger | None = None):
        self._logger: logging.Logger = custom_logger or logger

    def set_logger(self, custom_logger: logging.Logger):
        """Set a custom logger for this benchmark provider."""
        self._logger = custom_logger

    @abstractmethod
    def build_command(self, config: BenchmarkConfig, url: str) -> list[str]:
        """Build the load-generator command line for the target URL."""
        pass

    @abstractmethod
    def parse_results(self, output: str) -> BenchmarkResult:
        """Parse the load generator's report into a BenchmarkResult."""
        pass

    @abstractmethod
    def version(self, config: BenchmarkConfig) -> str | None:
        """Return the load generator's version string, or None if unavailable."""
        pass

    def execute(self, config: BenchmarkConfig, url: str) -> ExecutionResult:
        """Run the load generator against ``url`` and capture its combined output.

        Blocks until the tool exits or ``config.execution_timeout`` elapses.
        """
        cmd = self.build_command(config, url)
        self._logger.info(f"Running: {' '.join(cmd)}")

        try:
            process = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=config.execution_timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            reason = (
                f"{self.name} timed out after {config.execution_timeout:.0f} seconds"
            )
            self._logger.error(reason)
            return ExecutionFailure(reason)
        except OSError as e:
            reason = f"Failed to execute {self.name}: {e}"
            self._logger.error(reason)
            return ExecutionFailure(reason)

        output = process.stdout or ""
        if process.returncode != 0:
            self._logger.warning(
                f"{self.name} exited with code {process.returncode}:\n{output}"
            )
        if not output.strip():
            reason = f"{self.name} produced no output (exit code {process.returncode})"
            self._logger.error(reason)
            return ExecutionFailure(reason)

        self._logger.debug(f"{self.name} output:\n{output}")
        return ExecutionSuccess(output=output, returncode=process.returncode)
