"""
Result aggregation for compiler benchmarks.

Turns the ordered measurement records of one run into a BenchmarkSummary
with pairwise comparisons between successful targets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import combinations
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from cb_common.errors import AggregationInconsistencyError
from cb_runner.models.records import MeasurementRecord


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonMetric:
    """Comparison of ``candidate`` against ``baseline``.

    ``None`` means "not applicable" (a zero denominator), never zero.
    """

    baseline: str
    candidate: str
    speed_ratio: Optional[float]
    memory_delta_percent: Optional[float]


@dataclass(frozen=True)
class BenchmarkSummary:
    """Aggregate view of one benchmark run."""

    artifact_count: int
    successes: Mapping[str, bool]
    comparisons: tuple[ComparisonMetric, ...]

    @property
    def speedup_ratio(self) -> Optional[float]:
        """Ratio for the two-target case; None otherwise or when not computable."""
        if len(self.successes) != 2 or len(self.comparisons) != 1:
            return None
        return self.comparisons[0].speed_ratio

    def comparison(self, baseline: str, candidate: str) -> Optional[ComparisonMetric]:
        for metric in self.comparisons:
            if metric.baseline == baseline and metric.candidate == candidate:
                return metric
        return None


def compare(baseline: MeasurementRecord, candidate: MeasurementRecord) -> Optional[ComparisonMetric]:
    """Compare two records; None unless both succeeded."""
    if not (baseline.success and candidate.success):
        return None
    speed_ratio = (
        baseline.duration_ms / candidate.duration_ms if candidate.duration_ms else None
    )
    memory_delta_percent = (
        (baseline.memory_delta_bytes - candidate.memory_delta_bytes)
        / baseline.memory_delta_bytes
        * 100
        if baseline.memory_delta_bytes
        else None
    )
    return ComparisonMetric(
        baseline=baseline.target,
        candidate=candidate.target,
        speed_ratio=speed_ratio,
        memory_delta_percent=memory_delta_percent,
    )


def aggregate(
    records: Sequence[MeasurementRecord],
    *,
    artifact_count: int,
    expected_count: Optional[int] = None,
) -> BenchmarkSummary:
    """
    Build the summary for an ordered sequence of records.

    Pairs are formed in input order, the earlier record acting as baseline.

    Args:
        records: One record per target, in target order
        artifact_count: Number of workload artifacts the targets ran against
        expected_count: Number of targets supplied; checked when given

    Raises:
        AggregationInconsistencyError: On a record count mismatch or
            duplicate target names
    """
    if expected_count is not None and len(records) != expected_count:
        raise AggregationInconsistencyError(
            f"Expected {expected_count} measurement records, got {len(records)}",
            context={"expected": expected_count, "actual": len(records)},
        )
    names = [record.target for record in records]
    if len(names) != len(set(names)):
        raise AggregationInconsistencyError(
            "Duplicate target names in measurement records", context={"targets": names}
        )

    successes = {record.target: record.success for record in records}
    comparisons = tuple(
        metric
        for baseline, candidate in combinations(records, 2)
        if (metric := compare(baseline, candidate)) is not None
    )
    logger.debug(
        "Aggregated %s records into %s comparisons", len(records), len(comparisons)
    )
    return BenchmarkSummary(
        artifact_count=artifact_count,
        successes=MappingProxyType(successes),
        comparisons=comparisons,
    )
