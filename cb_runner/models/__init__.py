"""Configuration and record models for the runner."""

from cb_runner.models.config import (
    HarnessConfig,
    ReportConfig,
    RunnerConfig,
    TargetSpec,
    WorkloadConfig,
    default_targets,
)
from cb_runner.models.records import MeasurementRecord, WorkloadArtifact

__all__ = [
    "HarnessConfig",
    "MeasurementRecord",
    "ReportConfig",
    "RunnerConfig",
    "TargetSpec",
    "WorkloadArtifact",
    "WorkloadConfig",
    "default_targets",
]
