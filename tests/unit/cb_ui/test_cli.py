"""CLI tests driven through Typer's CliRunner."""

from __future__ import annotations

import json
import logging
import shlex
import sys

import pytest
from typer.testing import CliRunner

from cb_analytics.engine.aggregator import aggregate
from cb_analytics.reporting.emitter import build_document
from cb_controller.services.results import persist_report
from cb_runner.models.records import MeasurementRecord
from cb_ui.cli.main import app


pytestmark = pytest.mark.unit_ui

runner = CliRunner()

CB_ENV_VARS = (
    "CB_WORKLOAD_COUNT",
    "CB_WORKLOAD_DIR",
    "CB_TIMEOUT_SECONDS",
    "CB_MEMORY_MODE",
    "CB_REPORT_PATH",
    "CB_LOG_FILE",
    "CB_LOG_JSON",
)


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch, tmp_path):
    """Run every command from an empty directory with pristine logging and env."""
    for name in CB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def target_option(name: str, code: str) -> str:
    return f"{name}={shlex.quote(sys.executable)} -c {shlex.quote(code)}"


def test_run_writes_report_and_cleans_workload(tmp_path):
    report = tmp_path / "report.json"
    result = runner.invoke(
        app,
        [
            "run",
            "-t", target_option("fast", "pass"),
            "-t", target_option("broken", "import sys; sys.exit(4)"),
            "--count", "2",
            "--workdir", str(tmp_path / "work"),
            "--output", str(report),
            "--csv", str(tmp_path / "report.csv"),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Benchmark Results" in result.output
    assert "Results saved to" in result.output
    document = json.loads(report.read_text())
    assert [entry["target"] for entry in document["results"]] == ["fast", "broken"]
    assert document["summary"]["testFilesCount"] == 2
    assert document["summary"]["broken"] is False
    assert document["summary"]["speedupRatio"] is None
    assert (tmp_path / "report.csv").exists()
    assert list((tmp_path / "work").glob("test-file-*")) == []


def test_run_rejects_zero_count(tmp_path):
    result = runner.invoke(
        app,
        [
            "run",
            "-t", target_option("only", "pass"),
            "--count", "0",
            "--output", str(tmp_path / "r.json"),
        ],
    )

    assert result.exit_code == 1
    assert "Workload count must be a positive integer" in result.output
    assert not (tmp_path / "r.json").exists()


def test_run_rejects_malformed_target():
    result = runner.invoke(app, ["run", "-t", "no-equals-sign"])
    assert result.exit_code == 1
    assert "NAME=COMMAND" in result.output


def test_config_init_and_show(tmp_path):
    path = tmp_path / "cbench.yaml"
    first = runner.invoke(app, ["config", "init", "--path", str(path)])
    assert first.exit_code == 0, first.output
    assert path.exists()

    again = runner.invoke(app, ["config", "init", "--path", str(path)])
    assert again.exit_code == 1
    assert "already exists" in again.output

    shown = runner.invoke(app, ["config", "show"])
    assert shown.exit_code == 0, shown.output
    payload = json.loads(shown.output)
    assert [t["name"] for t in payload["targets"]] == ["tsc", "tsgo"]
    assert payload["workload"]["count"] == 25


def test_config_show_applies_env_overrides(monkeypatch):
    monkeypatch.setenv("CB_WORKLOAD_COUNT", "7")
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["workload"]["count"] == 7


def test_show_renders_saved_report(tmp_path):
    records = (
        MeasurementRecord("tsc", 500.0, 1_000_000, True),
        MeasurementRecord("tsgo", 100.0, 500_000, True),
    )
    document = build_document(aggregate(records, artifact_count=25), records)
    path = persist_report(tmp_path / "results.json", document)

    result = runner.invoke(app, ["show", str(path)])

    assert result.exit_code == 0, result.output
    assert "tsgo" in result.output
    assert "Workload files: 25" in result.output
    assert "Speedup ratio: 5.00" in result.output


def test_show_missing_report_fails(tmp_path):
    result = runner.invoke(app, ["show", str(tmp_path / "nope.json")])
    assert result.exit_code == 1
    assert "Cannot read report" in result.output


def test_diagnostics_writes_markdown(tmp_path):
    output = tmp_path / "diag.md"
    code = "import sys; print('flags', *sys.argv[1:])"
    result = runner.invoke(
        app,
        [
            "diagnostics",
            "-t", target_option("probe", code),
            "--extra-arg=--stats",
            "--output", str(output),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "probe: ok" in result.output
    text = output.read_text()
    assert "## probe diagnostics" in text
    assert "flags --stats" in text


@pytest.mark.parametrize("raw", ["blank=''", 'spaces="   "'])
def test_run_rejects_target_with_blank_command(raw):
    result = runner.invoke(app, ["run", "-t", raw])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "has no command" in result.output


@pytest.mark.parametrize(
    "payload",
    [b"[]", b'"just a string"', b'{"results": {"tsc": 1}}', b"\xff\xfe\x00not utf-8"],
)
def test_show_rejects_malformed_report(tmp_path, payload):
    path = tmp_path / "weird.json"
    path.write_bytes(payload)

    result = runner.invoke(app, ["show", str(path)])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Cannot read report" in result.output
