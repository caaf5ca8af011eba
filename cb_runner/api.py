"""Stable runner API surface."""

from cb_runner.engine.runner import TargetRunner
from cb_runner.models.config import (
    HarnessConfig,
    ReportConfig,
    RunnerConfig,
    TargetSpec,
    WorkloadConfig,
    default_targets,
)
from cb_runner.models.records import MeasurementRecord, WorkloadArtifact
from cb_runner.services.diagnostics import DiagnosticsCapture, write_diagnostics
from cb_runner.workload.generator import CleanupFailure, WorkloadGenerator

__all__ = [
    "CleanupFailure",
    "DiagnosticsCapture",
    "HarnessConfig",
    "MeasurementRecord",
    "ReportConfig",
    "RunnerConfig",
    "TargetRunner",
    "TargetSpec",
    "WorkloadArtifact",
    "WorkloadConfig",
    "WorkloadGenerator",
    "default_targets",
    "write_diagnostics",
]
