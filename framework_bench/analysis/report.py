"""Ranking, runtime comparison and result artifacts."""

from __future__ import annotations

import json
import logging
import time
from collections import defaultdict
from pathlib import Path
from typing import Any, Sequence

import pandas as pd

from ..core.results import AggregatedResult, RuntimeComparison
from ..core.system import SystemInfo

logger = logging.getLogger(__name__)

BENCHMARK_TOOL = "wrk"
JSON_ARTIFACT = "benchmark_results_wrk.json"
CSV_ARTIFACT = "benchmark_results_wrk.csv"
MARKDOWN_ARTIFACT = "benchmark_results_wrk.md"

CSV_COLUMNS = [
    "Environment",
    "Runtime",
    "Framework",
    "Requests/sec",
    "Avg Latency(ms)",
    "P50 Latency(ms)",
    "P90 Latency(ms)",
    "P99 Latency(ms)",
    "Throughput(MB/s)",
    "Total Requests",
    "Errors",
    "Timeouts",
    "RPS StdDev",
    "Latency StdDev",
]

RUNTIME_LABELS = {"node": "Node.js", "bun": "Bun"}


def percent_change(base: float, value: float) -> float:
    """(value - base) / base x 100; 0.0 when there is no baseline to compare to."""
    if base == 0:
        logger.warning("Baseline value is zero, reporting 0.0% change")
        return 0.0
    return (value - base) / base * 100


class ReportGenerator:
    """Ranks aggregated results and writes the JSON, CSV and Markdown artifacts."""

    def __init__(
        self,
        output_dir: Path | str = ".",
        baseline_runtime: str = "node",
        candidate_runtime: str = "bun",
        system_info: SystemInfo | None = None,
    ):
        self.output_dir: Path = Path(output_dir)
        self.baseline_runtime: str = baseline_runtime
        self.candidate_runtime: str = candidate_runtime
        self.system_info: SystemInfo | None = system_info

    def rank(self, aggregated: Sequence[AggregatedResult]) -> list[AggregatedResult]:
        """Sort by mean requests/sec, highest first; ties keep their input order."""
        return sorted(aggregated, key=lambda r: r.requests_per_second, reverse=True)

    def compare_runtimes(
        self,
        aggregated: Sequence[AggregatedResult],
        baseline: str | None = None,
        candidate: str | None = None,
    ) -> list[RuntimeComparison]:
        """Compare the candidate runtime against the baseline for each framework.

        Frameworks that were only measured on one of the two runtimes are skipped.
        Runtimes default to the ones the generator was created with.
        """
        baseline = baseline or self.baseline_runtime
        candidate = candidate or self.candidate_runtime
        groups: dict[str, dict[str, AggregatedResult]] = defaultdict(dict)
        for result in aggregated:
            groups[result.framework][result.runtime] = result

        comparisons: list[RuntimeComparison] = []
        for framework in sorted(groups):
            by_runtime = groups[framework]
            base = by_runtime.get(baseline)
            cand = by_runtime.get(candidate)
            if base is None or cand is None:
                continue
            comparisons.append(
                RuntimeComparison(
                    framework=framework,
                    baseline=base,
                    candidate=cand,
                    rps_improvement=percent_change(
                        base.requests_per_second, cand.requests_per_second
                    ),
                    # Lower latency is better, so the sign is flipped
                    latency_improvement=-percent_change(
                        base.avg_latency, cand.avg_latency
                    ),
                )
            )
        return comparisons

    def generate(self, aggregated: Sequence[AggregatedResult]) -> dict[str, Path]:
        """Log the summary and write every artifact."""
        ranked = self.rank(aggregated)
        self.log_summary(ranked)
        return self.write(ranked)

    def write(self, aggregated: Sequence[AggregatedResult]) -> dict[str, Path]:
        """Write each artifact independently.

        A failure to write one artifact is logged and does not prevent the
        others from being written.

        Returns:
            Mapping of artifact kind ("json", "csv", "markdown") to the path
            written, for the artifacts that succeeded
        """
        ranked = self.rank(aggregated)
        comparisons = self.compare_runtimes(ranked)
        writers = {
            "json": (JSON_ARTIFACT, lambda path: self._write_json(ranked, path)),
            "csv": (CSV_ARTIFACT, lambda path: self._write_csv(ranked, path)),
            "markdown": (
                MARKDOWN_ARTIFACT,
                lambda path: self._write_markdown(ranked, comparisons, path),
            ),
        }

        written: dict[str, Path] = {}
        for kind, (filename, writer) in writers.items():
            path = self.output_dir / filename
            try:
                writer(path)
            except OSError as e:
                logger.error(f"Failed to write {kind} results to {path}: {e}")
                continue
            written[kind] = path
            logger.info(f"Results saved to {path}")
        return written

    def to_json_record(self, aggregated: Sequence[AggregatedResult]) -> dict[str, Any]:
        return {
            "timestamp": str(int(time.time())),
            "benchmarkTool": BENCHMARK_TOOL,
            "results": [
                {
                    "environment": r.environment,
                    "runtime": r.runtime,
                    "framework": r.framework,
                    "requestsPerSecond": r.requests_per_second,
                    "avgLatency": r.avg_latency,
                    "p90Latency": r.p90_latency,
                    "p99Latency": r.p99_latency,
                    "throughput": r.throughput,
                    "errors": r.errors,
                }
                for r in aggregated
            ],
        }

    def to_dataframe(self, aggregated: Sequence[AggregatedResult]) -> pd.DataFrame:
        rows = [
            {
                "Environment": r.environment,
                "Runtime": r.runtime,
                "Framework": r.framework,
                "Requests/sec": r.requests_per_second,
                "Avg Latency(ms)": r.avg_latency,
                "P50 Latency(ms)": r.p50_latency,
                "P90 Latency(ms)": r.p90_latency,
                "P99 Latency(ms)": r.p99_latency,
                "Throughput(MB/s)": r.throughput_mb,
                "Total Requests": r.total_requests,
                "Errors": r.errors,
                "Timeouts": r.timeouts,
                "RPS StdDev": r.std_rps,
                "Latency StdDev": r.std_latency,
            }
            for r in aggregated
        ]
        return pd.DataFrame(rows, columns=CSV_COLUMNS)

    def _write_json(self, aggregated: Sequence[AggregatedResult], path: Path):
        with open(path, "w") as f:
            json.dump(self.to_json_record(aggregated), f, indent=2)
            f.write("\n")

    def _write_csv(self, aggregated: Sequence[AggregatedResult], path: Path):
        self.to_dataframe(aggregated).to_csv(path, index=False, float_format="%.2f")

    def _write_markdown(
        self,
        aggregated: Sequence[AggregatedResult],
        comparisons: Sequence[RuntimeComparison],
        path: Path,
    ):
        with open(path, "w") as f:
            f.write(self.render_markdown(aggregated, comparisons))

    def render_markdown(
        self,
        aggregated: Sequence[AggregatedResult],
        comparisons: Sequence[RuntimeComparison],
    ) -> str:
        ranked = self.rank(aggregated)
        lines = ["# Framework Benchmark Results", ""]
        if not ranked:
            lines.append("No pairing completed a successful run.")
            lines += self._environment_lines()
            return "\n".join(lines) + "\n"

        leader_rps = ranked[0].requests_per_second
        lines += [
            "## Performance Rankings",
            "",
            "### Requests per Second (Higher is Better)",
            "",
            "| Rank | Framework + Runtime | Requests/sec | Std Dev | Performance Score |",
            "|------|---------------------|--------------|---------|-------------------|",
        ]
        for rank, r in enumerate(ranked, start=1):
            score = r.requests_per_second / leader_rps * 100 if leader_rps else 0.0
            lines.append(
                f"| {rank} | **{r.environment}** | {r.requests_per_second:,.2f} "
                f"| ±{r.std_rps:,.2f} | {score:.1f}% |"
            )

        by_latency = sorted(ranked, key=lambda r: r.avg_latency)
        lines += [
            "",
            "### Latency Rankings (Lower is Better)",
            "",
            "| Rank | Framework + Runtime | Avg Latency | P50 Latency | P90 Latency | P99 Latency |",
            "|------|---------------------|-------------|-------------|-------------|-------------|",
        ]
        for rank, r in enumerate(by_latency, start=1):
            lines.append(
                f"| {rank} | **{r.environment}** | {r.avg_latency:.2f}ms "
                f"| {r.p50_latency:.2f}ms | {r.p90_latency:.2f}ms | {r.p99_latency:.2f}ms |"
            )

        if comparisons:
            base_label = RUNTIME_LABELS.get(self.baseline_runtime, self.baseline_runtime)
            cand_label = RUNTIME_LABELS.get(self.candidate_runtime, self.candidate_runtime)
            lines += [
                "",
                "## Runtime Comparisons",
                "",
                f"| Framework | {base_label} (req/sec) | {cand_label} (req/sec) "
                "| RPS Improvement | Latency Improvement |",
                "|-----------|------------------|-----------------|-----------------|---------------------|",
            ]
            for c in comparisons:
                lines.append(
                    f"| **{c.framework}** | {c.baseline.requests_per_second:,.2f} "
                    f"| {c.candidate.requests_per_second:,.2f} "
                    f"| {c.rps_improvement:+.1f}% | {c.latency_improvement:+.1f}% |"
                )

        consistent_framework, consistent_std = self._most_consistent_framework(ranked)
        lines += [
            "",
            "## Key Insights",
            "",
            f"- **Highest Throughput:** {ranked[0].environment} with "
            f"{ranked[0].requests_per_second:,.2f} requests/second",
            f"- **Lowest Latency:** {by_latency[0].environment} with "
            f"{by_latency[0].avg_latency:.2f}ms average response time",
            f"- **Most Consistent Framework:** {consistent_framework} "
            f"(lowest std deviation: ±{consistent_std:,.2f})",
        ]
        lines += self._environment_lines()
        return "\n".join(lines) + "\n"

    def _environment_lines(self) -> list[str]:
        info = self.system_info
        if info is None:
            return []
        lines = [
            "",
            "## Test Environment",
            "",
            "| Component | Details |",
            "|-----------|---------|",
            f"| **Operating System** | {info.platform} {info.arch} |",
            f"| **CPU** | {info.cpu_model} ({info.cpu_count} cores) |",
            f"| **Memory** | {info.total_memory_gb:.1f}GB total, "
            f"{info.free_memory_gb:.1f}GB available |",
            f"| **Hostname** | {info.hostname} |",
        ]
        for tool, version in info.tool_versions.items():
            lines.append(f"| **{RUNTIME_LABELS.get(tool, tool)} Version** | {version} |")
        return lines

    @staticmethod
    def _most_consistent_framework(
        aggregated: Sequence[AggregatedResult],
    ) -> tuple[str, float]:
        std_by_framework: dict[str, list[float]] = defaultdict(list)
        for r in aggregated:
            std_by_framework[r.framework].append(r.std_rps)
        averages = {
            framework: sum(stds) / len(stds)
            for framework, stds in std_by_framework.items()
        }
        framework = min(averages, key=averages.__getitem__)
        return framework, averages[framework]

    def log_summary(self, aggregated: Sequence[AggregatedResult]):
        """Log the final ranking, the detailed table and the runtime comparison."""
        ranked = self.rank(aggregated)
        logger.info("=== FINAL RESULTS ===")
        if not ranked:
            logger.warning("No pairing completed a successful run")
            return

        logger.info("Ranking by Requests/Second:")
        for rank, r in enumerate(ranked, start=1):
            logger.info(
                f"{rank}. {r.environment}: {r.requests_per_second:.2f} req/sec "
                f"(±{r.std_rps:.2f})"
            )

        logger.info("Detailed Comparison:")
        logger.info(
            f"{'Environment':<30}{'Req/sec':<12}{'Avg Lat(ms)':<12}"
            f"{'P90 Lat(ms)':<12}{'P99 Lat(ms)':<12}{'Throughput(MB/s)':<18}Errors"
        )
        logger.info("-" * 100)
        for r in ranked:
            logger.info(
                f"{r.environment:<30}{r.requests_per_second:<12.2f}"
                f"{r.avg_latency:<12.2f}{r.p90_latency:<12.2f}"
                f"{r.p99_latency:<12.2f}{r.throughput_mb:<18.2f}{r.errors}"
            )

        base_label = RUNTIME_LABELS.get(self.baseline_runtime, self.baseline_runtime)
        cand_label = RUNTIME_LABELS.get(self.candidate_runtime, self.candidate_runtime)
        logger.info(f"=== {base_label} vs {cand_label} Comparison ===")
        for c in self.compare_runtimes(ranked):
            logger.info(
                f"{c.framework}: {base_label} {c.baseline.requests_per_second:.2f} "
                f"req/sec, {c.baseline.avg_latency:.2f}ms avg latency; "
                f"{cand_label} {c.candidate.requests_per_second:.2f} req/sec, "
                f"{c.candidate.avg_latency:.2f}ms avg latency; "
                f"RPS Improvement: {c.rps_improvement:.1f}%, "
                f"Latency Improvement: {c.latency_improvement:.1f}%"
            )
