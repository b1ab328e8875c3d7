"""Logging configuration for framework-bench."""

from .manager import CentralizedLogger

__all__ = ["CentralizedLogger"]
