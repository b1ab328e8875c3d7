"""Unit tests for host and tool information."""

import subprocess
from unittest.mock import MagicMock, patch

from framework_bench.core import system
from framework_bench.core.system import collect_system_info, cpu_model, tool_version

CPUINFO = (
    "processor\t: 0\n"
    "vendor_id\t: AuthenticAMD\n"
    "model name\t: AMD EPYC 7763 64-Core Processor\n"
    "processor\t: 1\n"
    "model name\t: AMD EPYC 7763 64-Core Processor\n"
)


class TestToolVersion:
    """First line of ``--version`` output."""

    @patch("framework_bench.core.system.subprocess.run")
    def test_first_line(self, mock_run):
        mock_run.return_value = MagicMock(stdout="1.1.8\nextra\n", returncode=0)

        assert tool_version("bun") == "1.1.8"

    @patch("framework_bench.core.system.subprocess.run")
    def test_nonzero_exit_rejected_by_default(self, mock_run):
        mock_run.return_value = MagicMock(stdout="wrk 4.2.0 [epoll]\n", returncode=1)

        assert tool_version("wrk") is None
        assert tool_version("wrk", accept_nonzero_exit=True) == "wrk 4.2.0 [epoll]"

    @patch("framework_bench.core.system.subprocess.run")
    def test_no_output(self, mock_run):
        mock_run.return_value = MagicMock(stdout="", returncode=0)

        assert tool_version("node") is None

    @patch("framework_bench.core.system.subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired("node", 10)

        assert tool_version("node") is None


class TestCpuModel:
    @patch("framework_bench.core.system.platform.system", return_value="Linux")
    def test_linux_cpuinfo(self, mock_system, tmp_path, monkeypatch):
        cpuinfo = tmp_path / "cpuinfo"
        cpuinfo.write_text(CPUINFO)
        monkeypatch.setattr(system, "CPUINFO_PATH", cpuinfo)

        assert cpu_model() == "AMD EPYC 7763 64-Core Processor"

    @patch("framework_bench.core.system.platform.processor", return_value="")
    @patch("framework_bench.core.system.platform.system", return_value="Linux")
    def test_unreadable_cpuinfo(self, mock_system, mock_processor, tmp_path, monkeypatch):
        monkeypatch.setattr(system, "CPUINFO_PATH", tmp_path / "missing")

        assert cpu_model() == "Unknown"

    @patch("framework_bench.core.system.subprocess.run")
    @patch("framework_bench.core.system.platform.system", return_value="Darwin")
    def test_darwin_sysctl(self, mock_system, mock_run):
        mock_run.return_value = MagicMock(stdout="Apple M2 Pro\n", returncode=0)

        assert cpu_model() == "Apple M2 Pro"
        assert mock_run.call_args.args[0] == ["sysctl", "-n", "machdep.cpu.brand_string"]


@patch("framework_bench.core.system.cpu_model", return_value="AMD EPYC 7763")
@patch("framework_bench.core.system.psutil")
def test_collect_system_info(mock_psutil, mock_cpu_model):
    mock_psutil.virtual_memory.return_value = MagicMock(
        total=64 * 1024**3, available=16 * 1024**3
    )
    mock_psutil.cpu_count.return_value = 16

    info = collect_system_info({"node": "v20.11.0"})

    assert info.cpu_model == "AMD EPYC 7763"
    assert info.cpu_count == 16
    assert info.total_memory_gb == 64.0
    assert info.free_memory_gb == 16.0
    assert info.tool_versions == {"node": "v20.11.0"}
    assert info.hostname
    mock_psutil.cpu_count.assert_called_once_with(logical=True)
