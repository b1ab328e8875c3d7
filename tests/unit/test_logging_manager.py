"""Unit tests for centralized logging and per-run loggers."""

import logging

import pytest

from framework_bench.execution.controllers.run_loggers import RunLoggers
from framework_bench.logging import CentralizedLogger


@pytest.mark.usefixtures("restore_package_logger")
class TestCentralizedLogger:
    def test_level_and_console_handler(self):
        centralized = CentralizedLogger(log_level="debug")

        assert centralized.root_logger.name == "framework_bench"
        assert centralized.root_logger.level == logging.DEBUG
        assert len(centralized.root_logger.handlers) == 1

    def test_reconfiguring_replaces_handlers(self):
        CentralizedLogger()
        centralized = CentralizedLogger()

        assert len(centralized.root_logger.handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "bench.log"
        centralized = CentralizedLogger(file_path=log_file)

        centralized.get_run_logger("hono_on_bun", "controller").info("run started")
        centralized.flush()

        assert "framework_bench.runs.hono_on_bun.controller" in log_file.read_text()
        assert "run started" in log_file.read_text()

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError):
            CentralizedLogger(log_level="chatty")

    def test_from_env(self, tmp_path):
        log_file = tmp_path / "bench.log"
        centralized = CentralizedLogger.from_env(
            {
                "FRAMEWORK_BENCH_LOG_LEVEL": "WARNING",
                "FRAMEWORK_BENCH_LOG_FILE": str(log_file),
            }
        )

        assert centralized.log_level == logging.WARNING
        assert centralized.file_path == log_file


class TestRunLoggers:
    """Component loggers for one pairing."""

    @pytest.mark.usefixtures("restore_package_logger")
    def test_component_loggers(self, pairing):
        loggers = RunLoggers(CentralizedLogger())
        loggers.setup(pairing)

        assert loggers.get_logger("server").name == (
            "framework_bench.runs.express_on_node_js.server"
        )
        assert loggers.get_logger("benchmark").name.endswith(".benchmark")

    def test_fallback_without_centralized_logger(self, pairing):
        loggers = RunLoggers()
        loggers.setup(pairing)

        assert loggers.get_logger("controller").name == (
            "framework_bench.execution.controllers.run_loggers"
        )
        loggers.flush_all()
