"""Aggregation of repeated runs into per-pairing statistics."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from ..core.exceptions import EmptyAggregationError
from ..core.pairing import Pairing
from ..core.results import AggregatedResult, BenchmarkResult

logger = logging.getLogger(__name__)


class Aggregator:
    """Combines the successful runs of one pairing into an AggregatedResult."""

    def summarize(
        self, pairing: Pairing, results: Sequence[BenchmarkResult]
    ) -> AggregatedResult:
        """Average per-run metrics and sum per-run counters.

        Standard deviations are population deviations (divided by N): the runs
        are described, not used to estimate a wider population.

        Raises:
            EmptyAggregationError: If ``results`` is empty
        """
        if not results:
            raise EmptyAggregationError(
                f"No successful runs to aggregate for {pairing.name}"
            )

        rps = np.array([r.requests_per_second for r in results], dtype=float)
        latency = np.array([r.avg_latency for r in results], dtype=float)
        run_count = len(results)

        aggregated = AggregatedResult(
            environment=pairing.name,
            runtime=pairing.runtime,
            framework=pairing.framework,
            port=pairing.port,
            requests_per_second=float(np.mean(rps)),
            std_rps=float(np.std(rps, ddof=0)),
            avg_latency=float(np.mean(latency)),
            std_latency=float(np.std(latency, ddof=0)),
            p50_latency=float(np.mean([r.p50_latency for r in results])),
            p90_latency=float(np.mean([r.p90_latency for r in results])),
            p99_latency=float(np.mean([r.p99_latency for r in results])),
            throughput=sum(r.throughput for r in results) / run_count,
            total_requests=sum(r.total_requests for r in results),
            errors=sum(r.errors for r in results),
            timeouts=sum(r.timeouts for r in results),
            non_2xx_responses=sum(r.non_2xx_responses for r in results),
            runs=run_count,
            raw_runs=tuple(results),
        )

        logger.info(
            f"{pairing.name} - Average Results ({run_count} runs): "
            f"{aggregated.requests_per_second:.2f} req/sec "
            f"(±{aggregated.std_rps:.2f}), "
            f"{aggregated.avg_latency:.2f}ms avg latency "
            f"(±{aggregated.std_latency:.2f}), "
            f"P50 {aggregated.p50_latency:.2f}ms, "
            f"P90 {aggregated.p90_latency:.2f}ms, "
            f"P99 {aggregated.p99_latency:.2f}ms, "
            f"{aggregated.throughput_mb:.2f}MB/sec, "
            f"{aggregated.total_requests} requests, "
            f"{aggregated.errors} errors, {aggregated.timeouts} timeouts"
        )
        return aggregated
