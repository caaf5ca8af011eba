"""Tests for result aggregation."""

from __future__ import annotations

import pytest

from cb_analytics.engine.aggregator import aggregate, compare
from cb_common.errors import AggregationInconsistencyError
from cb_runner.models.records import MeasurementRecord


pytestmark = pytest.mark.unit_analytics


def ok(name: str, duration_ms: float, memory: int) -> MeasurementRecord:
    return MeasurementRecord(name, duration_ms, memory, True, exit_code=0)


def failed(name: str) -> MeasurementRecord:
    return MeasurementRecord(name, 12.0, 0, False, error_message="boom", error_type="NonZeroExitError")


def test_two_successful_targets() -> None:
    records = (ok("tsc", 500.0, 1_000_000), ok("tsgo", 100.0, 500_000))
    summary = aggregate(records, artifact_count=25, expected_count=2)

    assert summary.artifact_count == 25
    assert dict(summary.successes) == {"tsc": True, "tsgo": True}
    assert len(summary.comparisons) == 1
    metric = summary.comparisons[0]
    assert (metric.baseline, metric.candidate) == ("tsc", "tsgo")
    assert metric.speed_ratio == pytest.approx(5.0)
    assert metric.memory_delta_percent == pytest.approx(50.0)
    assert summary.speedup_ratio == pytest.approx(5.0)


def test_comparison_absent_when_either_side_failed() -> None:
    assert compare(ok("a", 1.0, 1), failed("b")) is None
    assert compare(failed("a"), ok("b", 1.0, 1)) is None

    summary = aggregate((ok("a", 1.0, 1), failed("b")), artifact_count=1)
    assert summary.comparisons == ()
    assert summary.speedup_ratio is None
    assert dict(summary.successes) == {"a": True, "b": False}


def test_zero_denominators_are_not_applicable() -> None:
    metric = compare(ok("a", 10.0, 0), ok("b", 0.0, 100))
    assert metric is not None
    assert metric.speed_ratio is None
    assert metric.memory_delta_percent is None


def test_negative_memory_deltas_are_used_as_is() -> None:
    metric = compare(ok("a", 10.0, -200), ok("b", 5.0, 100))
    # (-200 - 100) / -200 * 100
    assert metric.memory_delta_percent == pytest.approx(150.0)


def test_pairs_follow_input_order_for_three_targets() -> None:
    records = (ok("a", 30.0, 30), failed("b"), ok("c", 10.0, 10), ok("d", 15.0, 15))
    summary = aggregate(records, artifact_count=5)

    pairs = [(m.baseline, m.candidate) for m in summary.comparisons]
    assert pairs == [("a", "c"), ("a", "d"), ("c", "d")]
    assert summary.comparison("a", "c").speed_ratio == pytest.approx(3.0)
    assert summary.comparison("c", "a") is None
    assert summary.speedup_ratio is None
    assert list(summary.successes) == ["a", "b", "c", "d"]


def test_aggregate_is_deterministic_and_pure() -> None:
    records = [ok("a", 2.0, 10), ok("b", 1.0, 5)]
    snapshot = list(records)
    assert aggregate(records, artifact_count=2) == aggregate(records, artifact_count=2)
    assert records == snapshot


def test_count_mismatch_is_inconsistency() -> None:
    with pytest.raises(AggregationInconsistencyError):
        aggregate((ok("a", 1.0, 1),), artifact_count=1, expected_count=2)


def test_duplicate_names_are_inconsistency() -> None:
    with pytest.raises(AggregationInconsistencyError):
        aggregate((ok("a", 1.0, 1), ok("a", 2.0, 2)), artifact_count=1)


def test_record_invariants() -> None:
    with pytest.raises(ValueError):
        MeasurementRecord("a", 1.0, 0, False)
    with pytest.raises(ValueError):
        MeasurementRecord("a", 1.0, 0, True, error_message="nope")
    with pytest.raises(ValueError):
        MeasurementRecord("a", -1.0, 0, True)
