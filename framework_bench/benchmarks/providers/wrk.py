"""wrk benchmark provider implementation."""

from __future__ import annotations

import logging

from typing_extensions import override

from ...core.results import BenchmarkResult
from ...core.system import tool_version
from ..config import BenchmarkConfig
from ..parser import WrkOutputParser
from .base import BenchmarkProvider

logger = logging.getLogger(__name__)


class WrkBenchmark(BenchmarkProvider):
    """HTTP load generation with wrk."""

    name = "wrk"

    def __init__(
        self,
        custom_logger: logging.Logger | None = None,
        parser: WrkOutputParser | None = None,
    ):
        super().__init__(custom_logger)
        self.parser: WrkOutputParser = parser or WrkOutputParser()

    @override
    def build_command(self, config: BenchmarkConfig, url: str) -> list[str]:
        cmd = [
            config.wrk_binary,
            "-c",
            str(config.connections),
            "-t",
            str(config.threads),
            "-d",
            config.wrk_duration,
            "--timeout",
            config.wrk_timeout,
        ]
        if config.latency_stats:
            cmd.append("--latency")
        cmd.append(url)
        return cmd

    @override
    def parse_results(self, output: str) -> BenchmarkResult:
        return self.parser.parse(output)

    @override
    def version(self, config: BenchmarkConfig) -> str | None:
        # wrk prints its banner and usage, then exits non-zero
        return tool_version(config.wrk_binary, accept_nonzero_exit=True)
