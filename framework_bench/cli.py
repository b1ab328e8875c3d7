"""Command line entry point: benchmarks the full pairing catalog."""

from __future__ import annotations

import logging

from .analysis.report import ReportGenerator
from .benchmarks.config import BenchmarkConfig
from .execution.controllers.orchestrator import BenchmarkOrchestrator
from .logging.manager import CentralizedLogger

logger = logging.getLogger(__name__)


def _setup_logging() -> CentralizedLogger:
    try:
        return CentralizedLogger.from_env()
    except (ValueError, OSError) as e:
        centralized_logger = CentralizedLogger()
        logger.error(f"Invalid logging configuration, using defaults: {e}")
        return centralized_logger


def _load_config() -> BenchmarkConfig:
    try:
        return BenchmarkConfig.from_env()
    except ValueError as e:
        logger.error(f"Invalid configuration, using defaults: {e}")
        return BenchmarkConfig()


def main() -> None:
    """Run every pairing and write the reports.

    Takes no arguments; configuration comes from FRAMEWORK_BENCH_* environment
    variables. Failures are logged and never turned into a non-zero exit code.
    """
    centralized_logger = _setup_logging()
    try:
        config = _load_config()
        orchestrator = BenchmarkOrchestrator(
            config, centralized_logger=centralized_logger
        )
        results = orchestrator.run_all()
        ReportGenerator(
            output_dir=config.output_dir, system_info=orchestrator.system_info
        ).generate(results)
    except Exception as e:
        logger.error(f"Benchmark harness aborted: {e}", exc_info=True)
    except KeyboardInterrupt:
        logger.warning("Benchmark interrupted, servers have been stopped")
    finally:
        centralized_logger.flush()


if __name__ == "__main__":
    main()
