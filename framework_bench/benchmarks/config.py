"""Benchmark configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

ENV_PREFIX = "FRAMEWORK_BENCH_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class BenchmarkConfig:
    """Configuration for benchmark execution.

    Durations are expressed in seconds.
    """

    connections: int = 100  # wrk -c
    threads: int = 12  # wrk -t
    duration: int = 30  # wrk -d
    timeout: int = 10  # wrk --timeout, per request
    warmup: float = 3.0  # Delay between spawning a server and probing it
    cooldown: float = 2.0  # Delay after stopping a benchmarked server
    runs: int = 3  # Repeats per pairing
    latency_stats: bool = True  # wrk --latency, needed for percentiles
    wrk_binary: str = "wrk"

    # Server readiness and shutdown
    health_check_attempts: int = 20
    health_check_interval: float = 0.5
    health_check_timeout: float = 1.0
    shutdown_timeout: float = 10.0

    servers_dir: Path = field(default_factory=lambda: Path("."))
    output_dir: Path = field(default_factory=lambda: Path("."))

    def __post_init__(self):
        if self.runs < 1:
            raise ValueError(f"runs must be >= 1, got {self.runs}")
        if self.connections < 1 or self.threads < 1:
            raise ValueError(
                f"connections and threads must be >= 1, "
                f"got {self.connections} and {self.threads}"
            )
        if self.health_check_attempts < 1:
            raise ValueError(
                f"health_check_attempts must be >= 1, got {self.health_check_attempts}"
            )
        for name in (
            "duration",
            "timeout",
            "warmup",
            "cooldown",
            "health_check_interval",
            "health_check_timeout",
            "shutdown_timeout",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

    @property
    def wrk_duration(self) -> str:
        return f"{self.duration}s"

    @property
    def wrk_timeout(self) -> str:
        return f"{self.timeout}s"

    @property
    def execution_timeout(self) -> float:
        """Upper bound for a single load-generator invocation."""
        return self.duration + self.timeout + 60

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BenchmarkConfig:
        """Build a config, overriding defaults with FRAMEWORK_BENCH_<FIELD> variables.

        Raises:
            ValueError: If a variable cannot be converted or breaks an invariant
        """
        environ = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}
        for config_field in fields(cls):
            raw = environ.get(ENV_PREFIX + config_field.name.upper())
            if raw is None:
                continue
            overrides[config_field.name] = _convert(config_field.name, raw, config_field.type)
        return cls(**overrides)


def _convert(name: str, raw: str, annotation: Any) -> Any:
    # Annotations are strings under postponed evaluation
    type_name = annotation if isinstance(annotation, str) else annotation.__name__
    value = raw.strip()
    try:
        if type_name == "bool":
            lowered = value.lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ValueError(f"not a boolean: {raw!r}")
        if type_name == "int":
            return int(value)
        if type_name == "float":
            return float(value)
        if type_name == "Path":
            return Path(value)
    except ValueError as e:
        raise ValueError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {e}") from e
    return value
