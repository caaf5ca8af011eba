"""Public API surface for cb_controller."""

from cb_controller.controller_state import HarnessState, HarnessStateMachine
from cb_controller.orchestrator import HarnessOrchestrator, HarnessOutcome
from cb_controller.services.results import load_report, persist_report

__all__ = [
    "HarnessOrchestrator",
    "HarnessOutcome",
    "HarnessState",
    "HarnessStateMachine",
    "load_report",
    "persist_report",
]
