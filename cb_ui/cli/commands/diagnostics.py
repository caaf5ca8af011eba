from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from cb_common.errors import HarnessError
from cb_runner.services.diagnostics import DEFAULT_DIAGNOSTIC_ARGS, write_diagnostics
from cb_ui.cli.commands.run_helpers import build_overrides
from cb_ui.cli.context import CLIContext


def register_diagnostics_command(app: typer.Typer, ctx: CLIContext) -> None:
    """Register the diagnostics collection command."""

    @app.command("diagnostics")
    def diagnostics(
        config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file to load."),
        target: Optional[List[str]] = typer.Option(
            None, "--target", "-t", help="Target as NAME=COMMAND [ARGS...]; repeatable."
        ),
        output: Path = typer.Option(
            Path("README.md"), "--output", "-o", help="Markdown file to write."
        ),
        extra_arg: Optional[List[str]] = typer.Option(
            None,
            "--extra-arg",
            "-x",
            help="Argument appended to every target (default: --extendedDiagnostics).",
        ),
        cwd: Optional[Path] = typer.Option(
            None, "--cwd", help="Working directory for the targets (default: current directory)."
        ),
    ) -> None:
        """Run each target once with diagnostic flags and collect the output as Markdown."""
        try:
            cfg = ctx.load_config(config).apply_overrides(build_overrides(targets=target))
            captures = write_diagnostics(
                cfg.targets,
                output,
                extra_args=tuple(extra_arg) if extra_arg else DEFAULT_DIAGNOSTIC_ARGS,
                cwd=cwd,
                timeout=cfg.runner.timeout_seconds,
            )
        except HarnessError as exc:
            ctx.error(str(exc))
            raise typer.Exit(1)
        for capture in captures:
            status = "ok" if capture.exit_code == 0 else f"exit {capture.exit_code}"
            ctx.info(f"{capture.target}: {status}")
        ctx.success(f"Diagnostics written to {output}")
