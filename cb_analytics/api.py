"""Public API surface for cb_analytics."""

from cb_analytics.engine.aggregator import BenchmarkSummary, ComparisonMetric, aggregate, compare
from cb_analytics.reporting.emitter import build_document, render, render_text
from cb_analytics.reporting.export import records_to_frame, save_to_csv

__all__ = [
    "BenchmarkSummary",
    "ComparisonMetric",
    "aggregate",
    "build_document",
    "compare",
    "records_to_frame",
    "render",
    "render_text",
    "save_to_csv",
]
