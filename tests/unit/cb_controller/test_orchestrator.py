"""End-to-end runs of the harness orchestrator against real child processes."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cb_common.errors import InvalidArgumentError, StorageError
from cb_controller.controller_state import HarnessState
from cb_controller.orchestrator import HarnessOrchestrator
from cb_controller.services.results import load_report
from cb_runner.models.config import (
    HarnessConfig,
    ReportConfig,
    TargetSpec,
    WorkloadConfig,
)


pytestmark = pytest.mark.unit_controller


def make_config(tmp_path: Path, targets, count: int = 3, csv: bool = False) -> HarnessConfig:
    return HarnessConfig(
        targets=targets,
        workload=WorkloadConfig(count=count, directory=tmp_path / "work"),
        report=ReportConfig(
            output_path=tmp_path / "out" / "results.json",
            csv_path=tmp_path / "out" / "results.csv" if csv else None,
        ),
    )


def workload_files(tmp_path: Path) -> list[Path]:
    work = tmp_path / "work"
    return sorted(work.glob("test-file-*.ts")) if work.exists() else []


def test_full_run_with_two_targets(tmp_path, python_target, quiet_console):
    # Each target checks it can see the generated workload in its cwd.
    probe = "import glob, sys; sys.exit(0 if len(glob.glob('test-file-*.ts')) == 3 else 3)"
    cfg = make_config(
        tmp_path,
        [python_target("first", probe), python_target("second", probe)],
        csv=True,
    )
    orchestrator = HarnessOrchestrator(cfg, console=quiet_console)

    outcome = orchestrator.run()

    assert [r.target for r in outcome.records] == ["first", "second"]
    assert all(r.success for r in outcome.records)
    assert len(outcome.summary.comparisons) == 1
    assert orchestrator.state == HarnessState.DONE
    assert orchestrator.state_machine.history == (
        HarnessState.IDLE,
        HarnessState.GENERATING_WORKLOAD,
        HarnessState.RUNNING_TARGETS,
        HarnessState.AGGREGATING,
        HarnessState.EMITTING,
        HarnessState.CLEANING_UP,
        HarnessState.DONE,
    )

    document = load_report(outcome.report_path)
    assert document == json.loads(json.dumps(outcome.document))
    assert document["summary"]["testFilesCount"] == 3
    assert "speedupRatio" in document["summary"]
    assert outcome.csv_path is not None and outcome.csv_path.exists()
    assert not list(outcome.report_path.parent.glob("*.tmp"))

    printed = quiet_console.file.getvalue()
    assert "Benchmark Results" in printed
    assert "Workload artifacts: 3" in printed
    assert workload_files(tmp_path) == []


def test_missing_executable_is_recorded_not_raised(tmp_path, quiet_console):
    cfg = make_config(
        tmp_path, [TargetSpec(name="ghost", command="definitely-not-a-real-compiler-xyz")]
    )

    outcome = HarnessOrchestrator(cfg, console=quiet_console).run()

    (record,) = outcome.records
    assert record.success is False
    assert "Failed to launch" in record.error_message
    assert outcome.summary.comparisons == ()
    assert outcome.document["summary"] == {"testFilesCount": 3, "ghost": False}
    assert workload_files(tmp_path) == []


def test_failing_target_still_cleans_up(tmp_path, python_target, quiet_console):
    cfg = make_config(
        tmp_path,
        [
            python_target("good", "pass"),
            python_target("bad", "import sys; sys.stderr.write('type error'); sys.exit(2)"),
        ],
    )

    outcome = HarnessOrchestrator(cfg, console=quiet_console).run()

    bad = outcome.records[1]
    assert bad.success is False
    assert bad.exit_code == 2
    assert "type error" in bad.error_message
    assert outcome.document["summary"]["speedupRatio"] is None
    assert outcome.document["results"][1]["errorMessage"] == bad.error_message
    assert workload_files(tmp_path) == []


def test_invalid_count_fails_after_cleanup(tmp_path, python_target, quiet_console):
    cfg = make_config(tmp_path, [python_target("only", "pass")], count=0)
    orchestrator = HarnessOrchestrator(cfg, console=quiet_console)
    transitions = []
    orchestrator.on_transition(lambda state, reason: transitions.append(state))

    with pytest.raises(InvalidArgumentError):
        orchestrator.run()

    assert transitions == [
        HarnessState.GENERATING_WORKLOAD,
        HarnessState.CLEANING_UP,
        HarnessState.FAILED,
    ]
    assert orchestrator.state_machine.reason
    assert not (tmp_path / "work").exists()
    assert not (tmp_path / "out").exists()


def test_report_write_failure_is_fatal(tmp_path, python_target, quiet_console):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    cfg = make_config(tmp_path, [python_target("only", "pass")]).apply_overrides(
        {"report": {"output_path": blocker / "results.json"}}
    )
    orchestrator = HarnessOrchestrator(cfg, console=quiet_console)

    with pytest.raises(StorageError):
        orchestrator.run()

    assert orchestrator.state == HarnessState.FAILED
    assert HarnessState.CLEANING_UP in orchestrator.state_machine.history
    assert workload_files(tmp_path) == []


@pytest.mark.parametrize(
    "content", ["[]", '{"results": [1, 2]}', '{"results": [], "summary": []}']
)
def test_load_report_requires_report_shape(tmp_path, content):
    path = tmp_path / "report.json"
    path.write_text(content)

    with pytest.raises(StorageError):
        load_report(path)
