"""Benchmark orchestration across pairings and repeated runs."""

from __future__ import annotations

import logging
import time
from enum import Enum, auto
from typing import Callable, Sequence

from ...analysis.aggregator import Aggregator
from ...benchmarks.config import BenchmarkConfig
from ...benchmarks.providers import BenchmarkProvider, ExecutionFailure, WrkBenchmark
from ...core.pairing import DEFAULT_PAIRINGS, Pairing
from ...core.results import AggregatedResult, BenchmarkResult
from ...core.system import SystemInfo, collect_system_info
from ...logging.manager import CentralizedLogger
from ..backends import LocalProcessManager, ProcessManager, SpawnFailure
from .run_loggers import RunLoggers
from .utils import (
    NOT_AVAILABLE,
    classify_error,
    query_tool_versions,
    validate_environment,
)

logger = logging.getLogger(__name__)


class RunState(Enum):
    """States for run execution state machine."""

    SPAWN = auto()
    WARMUP = auto()
    HEALTH_CHECK = auto()
    RUN_BENCHMARK = auto()
    PARSE = auto()
    STOP = auto()
    COOLDOWN = auto()


class BenchmarkOrchestrator:
    """Runs every pairing ``config.runs`` times, one process at a time.

    Each run spawns the pairing's server, waits for it to answer, drives it with
    the load generator and tears it down again. Failed runs are logged and left
    out; a pairing without any successful run is left out of the results.
    """

    def __init__(
        self,
        config: BenchmarkConfig,
        pairings: Sequence[Pairing] = DEFAULT_PAIRINGS,
        process_manager: ProcessManager | None = None,
        benchmark_provider: BenchmarkProvider | None = None,
        aggregator: Aggregator | None = None,
        centralized_logger: CentralizedLogger | None = None,
        sleep: Callable[[float], None] = time.sleep,
        preflight_checks: bool = True,
    ):
        self.config: BenchmarkConfig = config
        self.pairings: tuple[Pairing, ...] = tuple(pairings)
        self.process_manager: ProcessManager = process_manager or LocalProcessManager(
            servers_dir=config.servers_dir,
            probe_timeout=config.health_check_timeout,
            shutdown_timeout=config.shutdown_timeout,
            sleep=sleep,
        )
        self.benchmark_provider: BenchmarkProvider = benchmark_provider or WrkBenchmark()
        self.aggregator: Aggregator = aggregator or Aggregator()
        self.loggers: RunLoggers = RunLoggers(centralized_logger)
        self.preflight_checks: bool = preflight_checks
        # Host description, collected by the preflight checks
        self.system_info: SystemInfo | None = None
        self._sleep: Callable[[float], None] = sleep

    def run_all(self) -> list[AggregatedResult]:
        """Benchmark every pairing in catalog order.

        Returns:
            Aggregated results of the pairings with at least one successful run
        """
        if self.preflight_checks:
            self._preflight()

        results: list[AggregatedResult] = []
        try:
            for pairing in self.pairings:
                try:
                    aggregated = self.run_pairing(pairing)
                except Exception as e:
                    logger.error(
                        f"Benchmark of {pairing.name} failed "
                        f"({classify_error(e)}): {e}",
                        exc_info=True,
                    )
                    continue
                if aggregated is not None:
                    results.append(aggregated)
        finally:
            self.process_manager.cleanup_all()

        logger.info(
            f"Completed {len(results)}/{len(self.pairings)} pairings successfully"
        )
        return results

    def run_pairing(self, pairing: Pairing) -> AggregatedResult | None:
        """Run all repeats of one pairing and aggregate the successful ones."""
        self.loggers.setup(pairing)
        controller_logger = self.loggers.get_logger("controller")
        self.process_manager.set_logger(self.loggers.get_logger("server"))
        self.benchmark_provider.set_logger(self.loggers.get_logger("benchmark"))

        controller_logger.info(f"=== Starting {pairing.name} ===")
        runs: list[BenchmarkResult] = []
        for run_number in range(1, self.config.runs + 1):
            controller_logger.info(
                f"--- Run {run_number}/{self.config.runs} for {pairing.name} ---"
            )
            result = self.run_once(pairing, run_number)
            if result is not None:
                runs.append(result)

        self.loggers.flush_all()
        if not runs:
            controller_logger.error(
                f"No successful runs for {pairing.name}, omitting it from the report"
            )
            return None

        controller_logger.info(
            f"Completed {len(runs)}/{self.config.runs} runs for {pairing.name}"
        )
        return self.aggregator.summarize(pairing, runs)

    def run_once(self, pairing: Pairing, run_number: int) -> BenchmarkResult | None:
        """Execute one spawn -> benchmark -> teardown cycle.

        Returns:
            The parsed result, or None if the run was skipped or failed
        """
        controller_logger = self.loggers.get_logger("controller")

        state = RunState.SPAWN
        handle = self.process_manager.spawn(pairing)
        if isinstance(handle, SpawnFailure):
            controller_logger.error(
                f"Failed to start server for {pairing.name}: {handle.reason}"
            )
            return None

        benchmarked = False
        try:
            state = RunState.WARMUP
            self._sleep(self.config.warmup)

            state = RunState.HEALTH_CHECK
            if not self.process_manager.wait_until_ready(
                pairing.port,
                max_attempts=self.config.health_check_attempts,
                interval=self.config.health_check_interval,
            ):
                controller_logger.error(
                    f"Server {pairing.name} failed to start on port {pairing.port}"
                )
                return None

            state = RunState.RUN_BENCHMARK
            benchmarked = True
            outcome = self.benchmark_provider.execute(self.config, pairing.url)
            if isinstance(outcome, ExecutionFailure):
                controller_logger.error(
                    f"Error in run {run_number} for {pairing.name}: {outcome.reason}"
                )
                return None

            state = RunState.PARSE
            result = self.benchmark_provider.parse_results(outcome.output)
            self._log_run(controller_logger, run_number, result)
            return result

        except Exception as e:
            controller_logger.error(
                f"Error in run {run_number} for {pairing.name} during {state.name} "
                f"({classify_error(e)}): {e}",
                exc_info=True,
            )
            return None
        finally:
            # STOP, then COOLDOWN once the load generator has been pointed at it
            self.process_manager.terminate(handle)
            if benchmarked:
                self._sleep(self.config.cooldown)

    def _log_run(
        self, run_logger: logging.Logger, run_number: int, result: BenchmarkResult
    ):
        run_logger.info(
            f"Run {run_number} Results: "
            f"{result.requests_per_second:.2f} req/sec, "
            f"avg {result.avg_latency:.2f}ms, "
            f"P50 {result.p50_latency:.2f}ms, "
            f"P90 {result.p90_latency:.2f}ms, "
            f"P99 {result.p99_latency:.2f}ms, "
            f"{result.throughput / 1024 / 1024:.2f}MB/sec, "
            f"{result.total_requests} requests, "
            f"{result.errors} errors, {result.timeouts} timeouts"
        )

    def _preflight(self):
        """Log the configuration, host and tool versions, and validate the environment."""
        config = self.config
        logger.info("Starting wrk-based framework benchmark")
        logger.info(
            f"Configuration: connections={config.connections}, "
            f"threads={config.threads}, duration={config.wrk_duration}, "
            f"timeout={config.wrk_timeout}, runs={config.runs}, "
            f"warmup={config.warmup}s, cooldown={config.cooldown}s, "
            f"latency_stats={config.latency_stats}"
        )

        versions = query_tool_versions(pairing.runtime for pairing in self.pairings)
        for runtime, version in versions.items():
            logger.info(f"{runtime}: {version}")
        wrk_version = self.benchmark_provider.version(config) or NOT_AVAILABLE
        logger.info(f"{self.benchmark_provider.name}: {wrk_version}")

        self.system_info = collect_system_info(
            {**versions, self.benchmark_provider.name: wrk_version}
        )
        self._log_system_info(self.system_info)

        validate_environment(config, self.pairings)

    def _log_system_info(self, info: SystemInfo):
        logger.info(f"System: {info.platform} {info.arch} ({info.hostname})")
        logger.info(f"CPU: {info.cpu_model} ({info.cpu_count} cores)")
        logger.info(
            f"Memory: {info.total_memory_gb:.1f}GB total, "
            f"{info.free_memory_gb:.1f}GB available"
        )
