"""Analytics package: aggregation and reporting of benchmark records."""

from cb_analytics.api import (  # noqa: F401
    BenchmarkSummary,
    ComparisonMetric,
    aggregate,
    render,
    save_to_csv,
)

__all__ = [
    "BenchmarkSummary",
    "ComparisonMetric",
    "aggregate",
    "render",
    "save_to_csv",
]
