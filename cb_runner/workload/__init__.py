"""Synthetic workload generation for compiler benchmarks."""

from cb_runner.workload.generator import CleanupFailure, WorkloadGenerator
from cb_runner.workload.templates import DEFAULT_TEMPLATE, render_artifact

__all__ = ["CleanupFailure", "DEFAULT_TEMPLATE", "WorkloadGenerator", "render_artifact"]
