"""Runner facade for compiler-bench components.

Re-exports the workload generator, target runner and their models.
"""

from cb_runner.api import (
    HarnessConfig,
    MeasurementRecord,
    TargetRunner,
    TargetSpec,
    WorkloadArtifact,
    WorkloadGenerator,
)

__all__ = [
    "HarnessConfig",
    "MeasurementRecord",
    "TargetRunner",
    "TargetSpec",
    "WorkloadArtifact",
    "WorkloadGenerator",
]
