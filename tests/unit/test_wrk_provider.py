"""Unit tests for the wrk benchmark provider."""

import subprocess
from dataclasses import replace
from unittest.mock import MagicMock, patch

from framework_bench.benchmarks.providers import (
    BENCHMARK_PROVIDERS,
    ExecutionFailure,
    ExecutionSuccess,
    WrkBenchmark,
)

from ..test_const import WRK_OUTPUT

URL = "http://localhost:3000"


def completed(stdout: str, returncode: int = 0) -> MagicMock:
    process = MagicMock()
    process.stdout = stdout
    process.returncode = returncode
    return process


class TestBuildCommand:
    """Command line construction."""

    def test_default_command(self, config):
        cmd = WrkBenchmark().build_command(config, URL)

        assert cmd == [
            "wrk", "-c", "100", "-t", "12", "-d", "30s",
            "--timeout", "10s", "--latency", URL,
        ]

    def test_without_latency_stats(self, config):
        config = replace(config, latency_stats=False, connections=50, duration=5)
        cmd = WrkBenchmark().build_command(config, URL)

        assert "--latency" not in cmd
        assert cmd[:7] == ["wrk", "-c", "50", "-t", "12", "-d", "5s"]
        assert cmd[-1] == URL

    def test_registered_provider(self):
        assert BENCHMARK_PROVIDERS["wrk"] is WrkBenchmark


class TestExecute:
    """Running wrk and reporting failures as values."""

    @patch("framework_bench.benchmarks.providers.base.subprocess.run")
    def test_success(self, mock_run, config):
        mock_run.return_value = completed(WRK_OUTPUT)

        outcome = WrkBenchmark().execute(config, URL)

        assert outcome == ExecutionSuccess(output=WRK_OUTPUT, returncode=0)
        args, kwargs = mock_run.call_args
        assert args[0][-1] == URL
        assert kwargs["stderr"] == subprocess.STDOUT
        assert kwargs["timeout"] == config.execution_timeout

    @patch("framework_bench.benchmarks.providers.base.subprocess.run")
    def test_missing_executable(self, mock_run, config):
        mock_run.side_effect = FileNotFoundError("No such file or directory: 'wrk'")

        outcome = WrkBenchmark().execute(config, URL)

        assert isinstance(outcome, ExecutionFailure)
        assert "wrk" in outcome.reason

    @patch("framework_bench.benchmarks.providers.base.subprocess.run")
    def test_timeout(self, mock_run, config):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="wrk", timeout=100)

        outcome = WrkBenchmark().execute(config, URL)

        assert isinstance(outcome, ExecutionFailure)
        assert "timed out" in outcome.reason

    @patch("framework_bench.benchmarks.providers.base.subprocess.run")
    def test_empty_output_is_failure(self, mock_run, config):
        mock_run.return_value = completed("   \n", returncode=1)

        outcome = WrkBenchmark().execute(config, URL)

        assert isinstance(outcome, ExecutionFailure)
        assert "no output" in outcome.reason

    @patch("framework_bench.benchmarks.providers.base.subprocess.run")
    def test_nonzero_exit_with_output_is_kept(self, mock_run, config):
        mock_run.return_value = completed(WRK_OUTPUT, returncode=1)

        outcome = WrkBenchmark().execute(config, URL)

        assert isinstance(outcome, ExecutionSuccess)
        assert outcome.returncode == 1

    def test_parse_results_delegates_to_parser(self):
        result = WrkBenchmark().parse_results(WRK_OUTPUT)
        assert result.requests_per_second == 19687.45


class TestVersion:
    """wrk version query."""

    @patch("framework_bench.core.system.subprocess.run")
    def test_first_line(self, mock_run, config):
        mock_run.return_value = completed(
            "wrk 4.2.0 [epoll] Copyright (C) 2012 Will Glozer\nUsage: wrk <options> <url>\n",
            returncode=1,
        )

        assert WrkBenchmark().version(config) == "wrk 4.2.0 [epoll] Copyright (C) 2012 Will Glozer"

    @patch("framework_bench.core.system.subprocess.run")
    def test_unavailable(self, mock_run, config):
        mock_run.side_effect = FileNotFoundError()

        assert WrkBenchmark().version(config) is None
