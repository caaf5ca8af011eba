"""
Target runner: one timed execution of an external compiler.

Sampling order is fixed: clock and memory are read immediately before the
child is launched and immediately after its exit is observed, so the
measured interval contains nothing but the child's lifetime.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from cb_common.errors import LaunchError, NonZeroExitError, TargetError, TargetTimeoutError
from cb_runner.engine.memory import ChildMemoryTracker, host_rss_bytes, kill_process_tree
from cb_runner.models.config import RunnerConfig, TargetSpec
from cb_runner.models.records import MeasurementRecord, WorkloadArtifact


logger = logging.getLogger(__name__)


class TargetRunner:
    """Run a TargetSpec once and turn the outcome into a MeasurementRecord."""

    def __init__(
        self,
        config: Optional[RunnerConfig] = None,
        cwd: Optional[Path] = None,
        clock: Callable[[], float] = time.perf_counter,
        memory_probe: Callable[[], int] = host_rss_bytes,
    ):
        """
        Initialize the runner.

        Args:
            config: Runner configuration
            cwd: Default working directory for targets (normally the workload directory)
            clock: Monotonic clock in seconds
            memory_probe: Host memory sampler used in ``host`` memory mode
        """
        self.config = config or RunnerConfig()
        self.cwd = cwd
        self._clock = clock
        self._memory_probe = memory_probe

    @property
    def child_mode(self) -> bool:
        return self.config.memory_mode == "child"

    def run(
        self,
        target: TargetSpec,
        workload: Sequence[WorkloadArtifact],
        timeout: Optional[float] = None,
    ) -> MeasurementRecord:
        """
        Execute ``target`` once.

        The workload is only reported on; targets find it on disk through
        their working directory.

        Args:
            target: What to launch
            workload: Artifacts already on disk
            timeout: Seconds before the target is killed; falls back to the
                configured ``timeout_seconds`` (no limit when both are unset)
        """
        if timeout is None:
            timeout = self.config.timeout_seconds
        cwd = target.cwd or self.cwd
        logger.info(
            "Running target '%s' against %s workload artifacts", target.name, len(workload)
        )
        logger.debug("Command: %s (cwd=%s)", " ".join(target.argv), cwd)

        start_time = self._clock()
        start_memory = self._sample_memory()
        try:
            proc = subprocess.Popen(
                target.argv,
                cwd=cwd,
                env=self._build_env(target),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            end_time = self._clock()
            end_memory = self._sample_memory()
            error = LaunchError(
                f"Failed to launch '{target.command}': {exc}",
                context={"target": target.name, "command": target.command},
                cause=exc,
            )
            return self._failure(target, start_time, end_time, start_memory, end_memory, error)

        tracker = ChildMemoryTracker(proc.pid) if self.child_mode else None
        stdout, stderr, timed_out = self._wait(proc, timeout, tracker)
        end_time = self._clock()
        end_memory = tracker.peak if tracker is not None else self._sample_memory()

        if timed_out:
            error = TargetTimeoutError(
                f"{target.name} timed out after {timeout:g}s",
                context={"target": target.name, "timeout_seconds": timeout},
            )
            return self._failure(target, start_time, end_time, start_memory, end_memory, error)

        if proc.returncode != 0:
            message = f"{target.name} exited with code {proc.returncode}"
            diagnostics = self._diagnostics(stdout, stderr)
            if diagnostics:
                message = f"{message}: {diagnostics}"
            error = NonZeroExitError(
                message,
                context={"target": target.name, "exit_code": proc.returncode},
            )
            return self._failure(
                target, start_time, end_time, start_memory, end_memory, error, proc.returncode
            )

        record = MeasurementRecord(
            target=target.name,
            duration_ms=(end_time - start_time) * 1000,
            memory_delta_bytes=end_memory - start_memory,
            success=True,
            exit_code=0,
        )
        logger.info("%s", record)
        return record

    def _wait(
        self,
        proc: subprocess.Popen,
        timeout: Optional[float],
        tracker: Optional[ChildMemoryTracker],
    ) -> tuple[str, str, bool]:
        """Drain output until exit; returns (stdout, stderr, timed_out)."""
        deadline = None if timeout is None else time.monotonic() + timeout
        interval = self.config.sample_interval_seconds if tracker is not None else None
        if tracker is not None:
            tracker.poll()
        while True:
            wait_for = interval
            if deadline is not None:
                remaining = max(0.0, deadline - time.monotonic())
                wait_for = remaining if wait_for is None else min(wait_for, remaining)
            try:
                stdout, stderr = proc.communicate(timeout=wait_for)
                return stdout or "", stderr or "", False
            except subprocess.TimeoutExpired:
                if tracker is not None:
                    tracker.poll()
                if deadline is not None and time.monotonic() >= deadline:
                    logger.warning("Target pid %s exceeded %ss; killing", proc.pid, timeout)
                    kill_process_tree(proc.pid)
                    stdout, stderr = proc.communicate()
                    return stdout or "", stderr or "", True

    def _sample_memory(self) -> int:
        # In child mode the baseline is zero: the child does not exist yet.
        if self.child_mode:
            return 0
        return self._memory_probe()

    def _diagnostics(self, stdout: str, stderr: str) -> str:
        text = stderr.strip() or stdout.strip()
        limit = self.config.max_diagnostic_chars
        if len(text) > limit:
            text = "..." + text[-limit:]
        return text

    @staticmethod
    def _build_env(target: TargetSpec) -> Optional[dict[str, str]]:
        if not target.env:
            return None
        return {**os.environ, **target.env}

    @staticmethod
    def _failure(
        target: TargetSpec,
        start_time: float,
        end_time: float,
        start_memory: int,
        end_memory: int,
        error: TargetError,
        exit_code: Optional[int] = None,
    ) -> MeasurementRecord:
        logger.warning("Target '%s' failed (%s): %s", target.name, error.error_type, error)
        return MeasurementRecord(
            target=target.name,
            duration_ms=(end_time - start_time) * 1000,
            memory_delta_bytes=end_memory - start_memory,
            success=False,
            error_message=str(error),
            error_type=error.error_type,
            exit_code=exit_code,
        )
