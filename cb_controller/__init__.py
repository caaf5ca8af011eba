"""Controller package: orchestration of a full benchmark run."""

from cb_controller.api import HarnessOrchestrator, HarnessOutcome, HarnessState

__all__ = ["HarnessOrchestrator", "HarnessOutcome", "HarnessState"]
