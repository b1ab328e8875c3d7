"""Aggregation and reporting of benchmark results."""

from .aggregator import Aggregator
from .report import ReportGenerator

__all__ = [
    "Aggregator",
    "ReportGenerator",
]
