"""Run logger management for benchmark pairings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...core.pairing import Pairing
    from ...logging.manager import CentralizedLogger

logger = logging.getLogger(__name__)

COMPONENTS = ("controller", "server", "benchmark")


class RunLoggers:
    """Manages pairing-specific loggers for controller, server, and benchmark components."""

    def __init__(self, centralized_logger: CentralizedLogger | None = None):
        self.centralized_logger: CentralizedLogger | None = centralized_logger
        self.run_loggers: dict[str, logging.Logger] = {}

    def setup(self, pairing: Pairing) -> None:
        """Setup loggers for the pairing about to be benchmarked."""
        self.run_loggers = {}
        if self.centralized_logger is None:
            # No specific logging config, use default loggers
            return

        for component in COMPONENTS:
            self.run_loggers[component] = self.centralized_logger.get_run_logger(
                pairing.slug, component
            )

    def get_logger(self, component: str) -> logging.Logger:
        """
        Get run logger for specific component.

        Fallback to default if not available.
        """
        return self.run_loggers.get(component, logger)

    def flush_all(self) -> None:
        """Flush any buffered records so a pairing's logs are complete on disk."""
        if self.centralized_logger is None:
            return
        try:
            self.centralized_logger.flush()
        except (OSError, ValueError) as e:
            logger.debug(f"Failed to flush log handlers: {e}")
