"""Shared test configuration and fixtures for all tests."""

from __future__ import annotations

import logging
from typing import Iterable

import pytest

from framework_bench.benchmarks.config import BenchmarkConfig
from framework_bench.benchmarks.parser import WrkOutputParser
from framework_bench.benchmarks.providers.base import (
    BenchmarkProvider,
    ExecutionFailure,
    ExecutionResult,
    ExecutionSuccess,
)
from framework_bench.core.pairing import Pairing
from framework_bench.core.results import BenchmarkResult
from framework_bench.execution.backends.base import (
    ProcessHandle,
    ProcessManager,
    SpawnFailure,
    SpawnResult,
)

from .test_const import WRK_OUTPUT


class FakeProcessManager(ProcessManager):
    """Test double that records lifecycle calls instead of starting processes."""

    def __init__(
        self,
        spawn_failures: Iterable[int] = (),
        unready: Iterable[int] = (),
    ):
        super().__init__(sleep=lambda seconds: None)
        # 1-based spawn numbers that fail or never become ready
        self.spawn_failures = set(spawn_failures)
        self.unready = set(unready)
        self.spawn_count = 0
        self.spawned: list[ProcessHandle] = []
        self.terminated: list[ProcessHandle] = []
        self.probed_ports: list[int] = []

    def spawn(self, pairing: Pairing) -> SpawnResult:
        self.spawn_count += 1
        if self.spawn_count in self.spawn_failures:
            return SpawnFailure(pairing, "exec failed")
        handle = ProcessHandle(pairing=pairing, pid=1000 + self.spawn_count)
        self.spawned.append(handle)
        return handle

    def probe_liveness(self, port: int) -> bool:
        self.probed_ports.append(port)
        return self.spawn_count not in self.unready

    def terminate(self, handle: ProcessHandle):
        self.terminated.append(handle)


class ScriptedBenchmark(BenchmarkProvider):
    """Provider returning canned outputs in order instead of running wrk."""

    name = "scripted"

    def __init__(self, outcomes: Iterable[ExecutionResult | str]):
        super().__init__()
        self.outcomes = [
            ExecutionSuccess(o) if isinstance(o, str) else o for o in outcomes
        ]
        self.calls: list[str] = []
        self.parser = WrkOutputParser()

    def build_command(self, config: BenchmarkConfig, url: str) -> list[str]:
        return ["scripted", url]

    def parse_results(self, output: str) -> BenchmarkResult:
        return self.parser.parse(output)

    def version(self, config: BenchmarkConfig) -> str | None:
        return "scripted 1.0"

    def execute(self, config: BenchmarkConfig, url: str) -> ExecutionResult:
        self.calls.append(url)
        if not self.outcomes:
            return ExecutionFailure("no scripted outcome left")
        return self.outcomes.pop(0)


@pytest.fixture
def config(tmp_path):
    """Fast configuration writing into a temporary directory."""
    return BenchmarkConfig(
        runs=3,
        warmup=0,
        cooldown=0,
        health_check_interval=0,
        servers_dir=tmp_path,
        output_dir=tmp_path,
    )


@pytest.fixture
def pairing():
    return Pairing("Express on Node.js", 3000, "node", "express", "express_server.js")


@pytest.fixture
def fake_process_manager():
    return FakeProcessManager()


@pytest.fixture
def parsed_result():
    return WrkOutputParser().parse(WRK_OUTPUT)


@pytest.fixture
def restore_package_logger():
    """Undo handler and level changes made by CentralizedLogger."""
    package_logger = logging.getLogger("framework_bench")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield package_logger
    for handler in list(package_logger.handlers):
        if handler not in handlers:
            package_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in package_logger.handlers:
            package_logger.addHandler(handler)
    package_logger.setLevel(level)
