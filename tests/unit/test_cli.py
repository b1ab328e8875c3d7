"""Unit tests for the command line entry point."""

from unittest.mock import patch

import pytest

from framework_bench import cli
from framework_bench.benchmarks.config import BenchmarkConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, restore_package_logger):
    for name in ("FRAMEWORK_BENCH_LOG_LEVEL", "FRAMEWORK_BENCH_LOG_FILE", "FRAMEWORK_BENCH_RUNS"):
        monkeypatch.delenv(name, raising=False)


@patch("framework_bench.cli.ReportGenerator")
@patch("framework_bench.cli.BenchmarkOrchestrator")
def test_main_runs_and_reports(mock_orchestrator, mock_report):
    mock_orchestrator.return_value.run_all.return_value = ["result"]

    cli.main()

    config = mock_orchestrator.call_args.args[0]
    assert config == BenchmarkConfig()
    mock_report.return_value.generate.assert_called_once_with(["result"])


@patch("framework_bench.cli.ReportGenerator")
@patch("framework_bench.cli.BenchmarkOrchestrator")
def test_main_never_raises(mock_orchestrator, mock_report):
    mock_orchestrator.return_value.run_all.side_effect = RuntimeError("boom")

    assert cli.main() is None
    mock_report.return_value.generate.assert_not_called()


@patch("framework_bench.cli.ReportGenerator")
@patch("framework_bench.cli.BenchmarkOrchestrator")
def test_interrupt_is_absorbed(mock_orchestrator, mock_report):
    mock_orchestrator.return_value.run_all.side_effect = KeyboardInterrupt

    assert cli.main() is None


@patch("framework_bench.cli.ReportGenerator")
@patch("framework_bench.cli.BenchmarkOrchestrator")
def test_invalid_environment_falls_back_to_defaults(
    mock_orchestrator, mock_report, monkeypatch
):
    monkeypatch.setenv("FRAMEWORK_BENCH_RUNS", "zero")
    monkeypatch.setenv("FRAMEWORK_BENCH_LOG_LEVEL", "chatty")
    mock_orchestrator.return_value.run_all.return_value = []

    cli.main()

    assert mock_orchestrator.call_args.args[0].runs == 3
    mock_report.return_value.generate.assert_called_once_with([])
