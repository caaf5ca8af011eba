"""Value objects flowing between harness stages."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional


@dataclass(frozen=True)
class WorkloadArtifact:
    """One generated input file, addressable by its path."""

    index: int
    path: Path


@dataclass(frozen=True)
class MeasurementRecord:
    """Timing, memory and outcome of a single target run.

    ``memory_delta_bytes`` is signed: a negative delta is a real observation
    (e.g. the host freed memory between samples) and is kept as-is.
    """

    target: str
    duration_ms: float
    memory_delta_bytes: int
    success: bool
    error_message: Optional[str] = None
    error_type: Optional[str] = None
    exit_code: Optional[int] = None

    def __post_init__(self) -> None:
        if self.duration_ms < 0:
            raise ValueError(f"duration_ms must be non-negative, got {self.duration_ms}")
        if self.success and self.error_message is not None:
            raise ValueError("a successful record cannot carry an error message")
        if not self.success and not self.error_message:
            raise ValueError("a failed record requires an error message")

    def to_dict(self) -> dict[str, Any]:
        """Report representation (one entry of ``results``)."""
        payload: dict[str, Any] = {
            "target": self.target,
            "executionTime": self.duration_ms,
            "memoryUsage": self.memory_delta_bytes,
            "success": self.success,
        }
        if not self.success:
            payload["errorMessage"] = self.error_message
        return payload

    def __str__(self) -> str:
        status = "✅ Success" if self.success else "❌ Failed"
        memory_mb = self.memory_delta_bytes / 1024 / 1024
        return (
            f"{self.target}: {status} | Time: {self.duration_ms:.2f}ms"
            f" | Memory: {memory_mb:.2f}MB"
        )
