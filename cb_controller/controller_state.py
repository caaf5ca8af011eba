"""Harness state machine primitives."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable, Optional


class HarnessState(str, Enum):
    """Lifecycle states of one benchmark run."""

    IDLE = "idle"
    GENERATING_WORKLOAD = "generating_workload"
    RUNNING_TARGETS = "running_targets"
    AGGREGATING = "aggregating"
    EMITTING = "emitting"
    CLEANING_UP = "cleaning_up"
    DONE = "done"
    FAILED = "failed"


_TERMINAL_STATES = {HarnessState.DONE, HarnessState.FAILED}


_ALLOWED_TRANSITIONS = {
    HarnessState.IDLE: {HarnessState.GENERATING_WORKLOAD},
    HarnessState.GENERATING_WORKLOAD: {
        HarnessState.RUNNING_TARGETS,
        HarnessState.CLEANING_UP,
    },
    HarnessState.RUNNING_TARGETS: {HarnessState.AGGREGATING, HarnessState.CLEANING_UP},
    HarnessState.AGGREGATING: {HarnessState.EMITTING, HarnessState.CLEANING_UP},
    HarnessState.EMITTING: {HarnessState.CLEANING_UP},
    HarnessState.CLEANING_UP: {HarnessState.DONE},
    HarnessState.DONE: set(),
    HarnessState.FAILED: set(),
}


class HarnessStateMachine:
    """Thread-safe harness state tracker.

    ``FAILED`` is reachable from every non-terminal state.
    """

    def __init__(self) -> None:
        self._state = HarnessState.IDLE
        self._lock = threading.RLock()
        self._reason: Optional[str] = None
        self._history: list[HarnessState] = [HarnessState.IDLE]
        self._callbacks: list[Callable[[HarnessState, Optional[str]], None]] = []

    @property
    def state(self) -> HarnessState:
        with self._lock:
            return self._state

    @property
    def reason(self) -> Optional[str]:
        with self._lock:
            return self._reason

    @property
    def history(self) -> tuple[HarnessState, ...]:
        with self._lock:
            return tuple(self._history)

    def is_terminal(self) -> bool:
        with self._lock:
            return self._state in _TERMINAL_STATES

    def register_callback(
        self, callback: Callable[[HarnessState, Optional[str]], None]
    ) -> None:
        """Register a callback invoked on every transition."""
        self._callbacks.append(callback)

    def transition(
        self, new_state: HarnessState, reason: Optional[str] = None
    ) -> HarnessState:
        """Attempt a state transition; raise ValueError if invalid."""
        with self._lock:
            allowed = _ALLOWED_TRANSITIONS.get(self._state, set())
            failing = new_state is HarnessState.FAILED and self._state not in _TERMINAL_STATES
            if new_state not in allowed and not failing:
                raise ValueError(f"Invalid transition {self._state} -> {new_state}")
            self._state = new_state
            self._reason = reason
            self._history.append(new_state)
            callbacks = list(self._callbacks)
        for cb in callbacks:
            cb(new_state, reason)
        return new_state

    def snapshot(self) -> tuple[HarnessState, Optional[str]]:
        with self._lock:
            return self._state, self._reason
