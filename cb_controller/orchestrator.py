"""
Harness orchestrator.

Sequences one benchmark run: generate the workload, run every target in
turn, aggregate, emit the report, and always clean the workload up.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from rich.console import Console

from cb_analytics.engine.aggregator import BenchmarkSummary, aggregate
from cb_analytics.reporting.emitter import render
from cb_analytics.reporting.export import save_to_csv
from cb_common.errors import HarnessError
from cb_controller.controller_state import HarnessState, HarnessStateMachine
from cb_controller.services.results import persist_report
from cb_runner.engine.runner import TargetRunner
from cb_runner.models.config import HarnessConfig
from cb_runner.models.records import MeasurementRecord, WorkloadArtifact
from cb_runner.workload.generator import CleanupFailure, WorkloadGenerator


logger = logging.getLogger(__name__)


@dataclass
class HarnessOutcome:
    """Everything a completed run produced."""

    records: tuple[MeasurementRecord, ...]
    summary: BenchmarkSummary
    text: str
    document: dict[str, Any]
    report_path: Path
    csv_path: Optional[Path] = None
    cleanup_failures: list[CleanupFailure] = field(default_factory=list)


class HarnessOrchestrator:
    """Run the full generate -> run -> aggregate -> emit -> cleanup pipeline."""

    def __init__(
        self,
        config: HarnessConfig,
        generator: Optional[WorkloadGenerator] = None,
        runner: Optional[TargetRunner] = None,
        console: Optional[Console] = None,
        state_machine: Optional[HarnessStateMachine] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Harness configuration
            generator: Workload generator; built from ``config.workload`` when omitted
            runner: Target runner; built from ``config.runner`` when omitted
            console: Where the human-readable report is printed
            state_machine: State tracker, injectable for observation
        """
        self.config = config
        self.generator = generator or WorkloadGenerator(config.workload)
        self.runner = runner or TargetRunner(config.runner, cwd=config.workload.directory)
        self.console = console or Console()
        self.state_machine = state_machine or HarnessStateMachine()
        self.cleanup_failures: list[CleanupFailure] = []

    @property
    def state(self) -> HarnessState:
        return self.state_machine.state

    def on_transition(self, callback: Callable[[HarnessState, Optional[str]], None]) -> None:
        self.state_machine.register_callback(callback)

    def run(self) -> HarnessOutcome:
        """
        Execute one benchmark run.

        Per-target failures end up in the records. Only harness errors
        (invalid workload size, storage failures, contract violations) are
        raised, after cleanup has run.
        """
        artifacts: tuple[WorkloadArtifact, ...] = ()
        failure: Optional[BaseException] = None
        outcome: Optional[HarnessOutcome] = None
        try:
            self._enter(HarnessState.GENERATING_WORKLOAD)
            artifacts = self.generator.generate(self.config.workload.count)

            self._enter(HarnessState.RUNNING_TARGETS)
            records = self._run_targets(artifacts)

            self._enter(HarnessState.AGGREGATING)
            summary = aggregate(
                records,
                artifact_count=len(artifacts),
                expected_count=len(self.config.targets),
            )

            self._enter(HarnessState.EMITTING)
            outcome = self._emit(summary, records)
        except BaseException as exc:
            failure = exc
            raise
        finally:
            self._enter(HarnessState.CLEANING_UP)
            self.cleanup_failures = self.generator.cleanup(artifacts)
            if failure is None:
                self._enter(HarnessState.DONE)
            else:
                reason = str(failure) if isinstance(failure, HarnessError) else repr(failure)
                self.state_machine.transition(HarnessState.FAILED, reason=reason)
                logger.error("Benchmark run failed: %s", reason)

        outcome.cleanup_failures = self.cleanup_failures
        return outcome

    def _run_targets(
        self, artifacts: tuple[WorkloadArtifact, ...]
    ) -> tuple[MeasurementRecord, ...]:
        # One at a time: concurrent targets would pollute each other's memory samples.
        records = []
        total = len(self.config.targets)
        for position, target in enumerate(self.config.targets, start=1):
            logger.info("Target %s/%s: %s", position, total, target.name)
            records.append(self.runner.run(target, artifacts))
        return tuple(records)

    def _emit(
        self, summary: BenchmarkSummary, records: tuple[MeasurementRecord, ...]
    ) -> HarnessOutcome:
        text, document = render(summary, records)
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)
        report_path = persist_report(self.config.report.output_path, document)
        csv_path = None
        if self.config.report.csv_path is not None:
            csv_path = save_to_csv(records, self.config.report.csv_path)
        return HarnessOutcome(
            records=records,
            summary=summary,
            text=text,
            document=document,
            report_path=report_path,
            csv_path=csv_path,
        )

    def _enter(self, state: HarnessState) -> None:
        logger.debug("Harness state -> %s", state.value)
        self.state_machine.transition(state)
