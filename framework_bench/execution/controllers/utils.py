import logging
import shutil
from typing import Iterable

from ...benchmarks.config import BenchmarkConfig
from ...core.pairing import Pairing
from ...core.system import tool_version

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "not available"

# Error classification patterns for run failure logging
# Maps error types to keyword patterns used by classify_error()
ERROR_PATTERNS: dict[str, list[str]] = {
    "Timeout": ["timeout", "timed out"],
    "Connection_Error": ["connection refused", "connection reset", "unable to connect"],
    "Parse_Error": ["could not convert", "invalid literal", "parse"],
    "Process_Error": ["no such file", "permission denied", "exec format", "process"],
}


def classify_error(exception: Exception) -> str:
    """Classify error type based on exception message.

    Returns:
        Error type string (e.g., "Timeout", "Parse_Error") or "Unknown"
    """
    error_message = str(exception).lower()

    for error_type, patterns in ERROR_PATTERNS.items():
        if any(pattern in error_message for pattern in patterns):
            return error_type

    return "Unknown"


def validate_environment(
    config: BenchmarkConfig, pairings: Iterable[Pairing]
) -> list[str]:
    """Check that the load generator, runtimes and server scripts are present.

    Problems are logged as warnings and returned; affected runs still fail
    individually when they are attempted.
    """
    pairings = list(pairings)
    problems: list[str] = []

    required_commands = {config.wrk_binary: "HTTP load generator"}
    for pairing in pairings:
        required_commands.setdefault(pairing.runtime, f"{pairing.runtime} runtime")

    for command, description in required_commands.items():
        if not shutil.which(command):
            problems.append(f"Missing command in PATH: {command} ({description})")

    scripts = dict.fromkeys(pairing.script for pairing in pairings)
    for script in scripts:
        script_path = config.servers_dir / script
        if not script_path.is_file():
            problems.append(f"Missing server script: {script_path}")

    for problem in problems:
        logger.warning(problem)
    if not problems:
        logger.info("Environment validation passed")
    return problems


def query_tool_version(binary: str) -> str:
    """Return the first line of ``<binary> --version``, or "not available"."""
    return tool_version(binary) or NOT_AVAILABLE


def query_tool_versions(runtimes: Iterable[str]) -> dict[str, str]:
    """Query the version of each distinct runtime binary, in first-seen order."""
    return {runtime: query_tool_version(runtime) for runtime in dict.fromkeys(runtimes)}
