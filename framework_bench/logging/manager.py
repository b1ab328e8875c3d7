"""Centralized logging setup for framework-bench."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

ROOT_LOGGER_NAME = "framework_bench"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CentralizedLogger:
    """Configures the package logger hierarchy and hands out per-run loggers.

    Handlers are attached once to the ``framework_bench`` logger; run loggers
    are children of it and propagate their records there.
    """

    def __init__(
        self,
        log_level: str | int = "INFO",
        file_path: str | Path | None = None,
    ):
        self.log_level: int = (
            logging.getLevelName(log_level.upper())
            if isinstance(log_level, str)
            else log_level
        )
        if not isinstance(self.log_level, int):
            raise ValueError(f"Unknown log level: {log_level}")
        self.file_path: Path | None = Path(file_path) if file_path else None
        self.root_logger: logging.Logger = logging.getLogger(ROOT_LOGGER_NAME)
        self._configure()

    def _configure(self):
        self.root_logger.setLevel(self.log_level)
        formatter = logging.Formatter(LOG_FORMAT)

        # Replace handlers from a previous configuration
        for handler in list(self.root_logger.handlers):
            self.root_logger.removeHandler(handler)
            handler.close()

        console = logging.StreamHandler()
        console.setFormatter(formatter)
        self.root_logger.addHandler(console)

        if self.file_path:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.file_path)
            file_handler.setFormatter(formatter)
            self.root_logger.addHandler(file_handler)

    def get_run_logger(self, run_id: str, component: str) -> logging.Logger:
        """Get the logger for one component (controller, server, benchmark) of a run."""
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.runs.{run_id}.{component}")

    def flush(self):
        for handler in self.root_logger.handlers:
            handler.flush()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CentralizedLogger:
        """Configure from FRAMEWORK_BENCH_LOG_LEVEL and FRAMEWORK_BENCH_LOG_FILE."""
        environ = os.environ if environ is None else environ
        return cls(
            log_level=environ.get("FRAMEWORK_BENCH_LOG_LEVEL", "INFO"),
            file_path=environ.get("FRAMEWORK_BENCH_LOG_FILE") or None,
        )
