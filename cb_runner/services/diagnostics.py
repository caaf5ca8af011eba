"""Collect compiler self-diagnostics into a Markdown document.

Each target is invoked once with extra arguments (``--extendedDiagnostics``
for the TypeScript compilers) and its combined output is captured verbatim.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from cb_common.errors import StorageError
from cb_runner.models.config import TargetSpec


logger = logging.getLogger(__name__)

DEFAULT_DIAGNOSTIC_ARGS: tuple[str, ...] = ("--extendedDiagnostics",)


@dataclass(frozen=True)
class DiagnosticsCapture:
    """Combined output of one diagnostics invocation."""

    target: str
    argv: tuple[str, ...]
    output: str
    exit_code: Optional[int]


def capture_diagnostics(
    target: TargetSpec,
    extra_args: Sequence[str] = DEFAULT_DIAGNOSTIC_ARGS,
    cwd: Optional[Path] = None,
    timeout: Optional[float] = None,
) -> DiagnosticsCapture:
    """Run ``target`` with ``extra_args`` appended and capture stdout+stderr."""
    argv = (*target.argv, *extra_args)
    logger.info("Collecting diagnostics for '%s'", target.name)
    try:
        proc = subprocess.run(
            argv,
            cwd=target.cwd or cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except OSError as exc:
        return DiagnosticsCapture(
            target.name, argv, f"Failed to launch '{target.command}': {exc}", None
        )
    except subprocess.TimeoutExpired as exc:
        partial = exc.output or ""
        if isinstance(partial, bytes):
            partial = partial.decode("utf-8", errors="replace")
        return DiagnosticsCapture(
            target.name, argv, f"{partial}\n[timed out after {timeout:g}s]".lstrip(), None
        )
    return DiagnosticsCapture(target.name, argv, proc.stdout or "", proc.returncode)


def render_markdown(
    captures: Sequence[DiagnosticsCapture], title: str = "Compiler comparison"
) -> str:
    lines = [f"# {title}", ""]
    for capture in captures:
        lines.append(f"## {capture.target} diagnostics")
        lines.append("")
        lines.append(f"`{' '.join(capture.argv)}`")
        if capture.exit_code not in (0, None):
            lines.append("")
            lines.append(f"Exit code: {capture.exit_code}")
        lines.append("")
        lines.append("```")
        lines.append(capture.output.rstrip("\n"))
        lines.append("```")
        lines.append("")
    return "\n".join(lines)


def write_diagnostics(
    targets: Sequence[TargetSpec],
    output_path: Path,
    extra_args: Sequence[str] = DEFAULT_DIAGNOSTIC_ARGS,
    cwd: Optional[Path] = None,
    timeout: Optional[float] = None,
) -> list[DiagnosticsCapture]:
    """Capture diagnostics for every target, one at a time, and write the document."""
    captures = [capture_diagnostics(t, extra_args, cwd=cwd, timeout=timeout) for t in targets]
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(render_markdown(captures), encoding="utf-8")
    except OSError as exc:
        raise StorageError(
            f"Cannot write diagnostics to {output_path}: {exc}",
            context={"path": output_path},
            cause=exc,
        ) from exc
    logger.info("Diagnostics written to %s", output_path)
    return captures
