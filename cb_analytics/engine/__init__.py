"""Aggregation engine."""

from cb_analytics.engine.aggregator import BenchmarkSummary, ComparisonMetric, aggregate, compare

__all__ = ["BenchmarkSummary", "ComparisonMetric", "aggregate", "compare"]
