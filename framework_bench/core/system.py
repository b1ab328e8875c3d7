"""Host and tool information recorded alongside benchmark results."""

from __future__ import annotations

import logging
import platform
import socket
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import psutil

logger = logging.getLogger(__name__)

CPUINFO_PATH = Path("/proc/cpuinfo")
UNKNOWN = "Unknown"


@dataclass(frozen=True)
class SystemInfo:
    """Machine the benchmarks ran on. Memory figures are in GiB."""

    platform: str
    arch: str
    cpu_model: str
    cpu_count: int
    total_memory_gb: float
    free_memory_gb: float
    hostname: str
    tool_versions: dict[str, str] = field(default_factory=dict)


def tool_version(
    binary: str, accept_nonzero_exit: bool = False, timeout: float = 10
) -> str | None:
    """Return the first line printed by ``<binary> --version``.

    Some tools (wrk) print their banner and exit non-zero; pass
    ``accept_nonzero_exit`` for those.

    Returns:
        The version line, or None if the tool cannot be run or prints nothing
    """
    try:
        process = subprocess.run(
            [binary, "--version"],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug(f"Could not query {binary} version: {e}")
        return None
    if process.returncode != 0 and not accept_nonzero_exit:
        logger.debug(f"{binary} --version exited with code {process.returncode}")
        return None
    lines = (process.stdout or "").strip().splitlines()
    return lines[0].strip() if lines else None


def cpu_model() -> str:
    if platform.system() == "Linux":
        try:
            for line in CPUINFO_PATH.read_text().splitlines():
                if line.startswith("model name"):
                    return line.split(":", 1)[1].strip()
        except OSError as e:
            logger.debug(f"Could not read {CPUINFO_PATH}: {e}")
    elif platform.system() == "Darwin":
        try:
            process = subprocess.run(
                ["sysctl", "-n", "machdep.cpu.brand_string"],
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                timeout=5,
                check=False,
            )
            if process.returncode == 0 and process.stdout.strip():
                return process.stdout.strip()
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"Could not query CPU model: {e}")
    return platform.processor() or UNKNOWN


def collect_system_info(tool_versions: dict[str, str] | None = None) -> SystemInfo:
    memory = psutil.virtual_memory()
    return SystemInfo(
        platform=platform.system().lower(),
        arch=platform.machine(),
        cpu_model=cpu_model(),
        cpu_count=psutil.cpu_count(logical=True) or 0,
        total_memory_gb=memory.total / 1024**3,
        free_memory_gb=memory.available / 1024**3,
        hostname=socket.gethostname(),
        tool_versions=dict(tool_versions or {}),
    )
