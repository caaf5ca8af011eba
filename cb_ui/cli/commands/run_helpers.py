"""Helpers shared by the run and diagnostics commands."""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from cb_common.errors import ConfigurationError
from cb_runner.models.config import TargetSpec


def parse_target_option(raw: str) -> TargetSpec:
    """Parse ``name=command arg ...`` into a TargetSpec."""
    name, sep, command_line = raw.partition("=")
    name = name.strip()
    if not sep or not name:
        raise ConfigurationError(
            f"Invalid target '{raw}': expected NAME=COMMAND [ARGS...]", context={"target": raw}
        )
    try:
        argv = shlex.split(command_line)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid target '{raw}': {exc}", cause=exc) from exc
    if not argv or not argv[0].strip():
        raise ConfigurationError(f"Target '{name}' has no command", context={"target": raw})
    try:
        return TargetSpec(name=name, command=argv[0], args=tuple(argv[1:]))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid target '{raw}': {exc}", cause=exc) from exc


def build_overrides(
    targets: Optional[Sequence[str]] = None,
    count: Optional[int] = None,
    workdir: Optional[Path] = None,
    output: Optional[Path] = None,
    csv: Optional[Path] = None,
    timeout: Optional[float] = None,
    memory_mode: Optional[str] = None,
) -> Dict[str, Any]:
    """Translate CLI flags into a config override mapping (None keeps the config value)."""
    parsed: Optional[List[Dict[str, Any]]] = None
    if targets:
        parsed = [parse_target_option(raw).model_dump() for raw in targets]
    return {
        "targets": parsed,
        "workload": {"count": count, "directory": workdir},
        "runner": {"timeout_seconds": timeout, "memory_mode": memory_mode},
        "report": {"output_path": output, "csv_path": csv},
    }


def build_results_table(results: Sequence[Dict[str, Any]]) -> Table:
    """Tabulate the ``results`` entries of a persisted report."""
    table = Table(title="Benchmark Results", show_header=True, header_style="bold magenta")
    table.add_column("Target", style="cyan")
    table.add_column("Status")
    table.add_column("Time (ms)", justify="right")
    table.add_column("Memory (MB)", justify="right")
    table.add_column("Error")
    for entry in results:
        success = bool(entry.get("success"))
        table.add_row(
            escape(str(entry.get("target", "?"))),
            "[green]ok[/green]" if success else "[red]failed[/red]",
            f"{float(entry.get('executionTime', 0)):.2f}",
            f"{float(entry.get('memoryUsage', 0)) / 1024 / 1024:.2f}",
            "" if success else escape(str(entry.get("errorMessage", ""))),
        )
    return table
