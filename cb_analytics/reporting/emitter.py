"""
Report rendering for compiler benchmarks.

Produces the human-readable text and the machine-readable document from a
summary and its records. Nothing here touches the disk or the console.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from cb_analytics.engine.aggregator import BenchmarkSummary, ComparisonMetric
from cb_runner.models.records import MeasurementRecord


def describe_speed(metric: ComparisonMetric) -> str:
    if metric.speed_ratio is None:
        return f"Speed comparison of {metric.candidate} vs {metric.baseline}: not applicable"
    if metric.speed_ratio >= 1:
        return f"{metric.candidate} is {metric.speed_ratio:.2f}x faster than {metric.baseline}"
    if metric.speed_ratio == 0:
        return f"{metric.candidate} is infinitely slower than {metric.baseline}"
    return f"{metric.candidate} is {1 / metric.speed_ratio:.2f}x slower than {metric.baseline}"


def describe_memory(metric: ComparisonMetric) -> str:
    pct = metric.memory_delta_percent
    if pct is None:
        return f"Memory comparison of {metric.candidate} vs {metric.baseline}: not applicable"
    # A positive percentage means the candidate needed less than the baseline.
    direction = "less" if pct > 0 else "more"
    return f"{metric.candidate} uses {abs(pct):.1f}% {direction} memory than {metric.baseline}"


def render_text(summary: BenchmarkSummary, records: Sequence[MeasurementRecord]) -> str:
    lines = ["Benchmark Results", "=================", ""]
    lines.extend(str(record) for record in records)
    for record in records:
        if not record.success:
            lines.append(f"  {record.target}: {record.error_message}")
    if summary.comparisons:
        lines.append("")
        for metric in summary.comparisons:
            lines.append(describe_speed(metric))
            lines.append(describe_memory(metric))
    lines.append("")
    lines.append(f"Workload artifacts: {summary.artifact_count}")
    return "\n".join(lines)


def build_document(
    summary: BenchmarkSummary,
    records: Sequence[MeasurementRecord],
    generated_at: Optional[datetime] = None,
) -> dict[str, Any]:
    """Assemble the persisted report (``timestamp``/``results``/``summary``)."""
    timestamp = generated_at or datetime.now(timezone.utc)
    summary_doc: dict[str, Any] = {"testFilesCount": summary.artifact_count}
    summary_doc.update(summary.successes)
    if len(records) == 2:
        summary_doc["speedupRatio"] = summary.speedup_ratio
    return {
        "timestamp": timestamp.isoformat(),
        "results": [record.to_dict() for record in records],
        "summary": summary_doc,
    }


def render(
    summary: BenchmarkSummary,
    records: Sequence[MeasurementRecord],
    generated_at: Optional[datetime] = None,
) -> tuple[str, dict[str, Any]]:
    """Return (human-readable text, machine-readable document)."""
    return render_text(summary, records), build_document(summary, records, generated_at)
