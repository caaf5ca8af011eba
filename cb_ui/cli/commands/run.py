from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from cb_common.errors import HarnessError
from cb_controller.orchestrator import HarnessOrchestrator
from cb_ui.cli.commands.run_helpers import build_overrides
from cb_ui.cli.context import CLIContext


def register_run_command(app: typer.Typer, ctx: CLIContext) -> None:
    """Register the main run command on the given Typer app."""

    @app.command("run")
    def run(
        config: Optional[Path] = typer.Option(
            None,
            "--config",
            "-c",
            help="Config file (JSON/YAML); uses ./cbench.yaml or ./cbench.json when present.",
        ),
        target: Optional[List[str]] = typer.Option(
            None,
            "--target",
            "-t",
            help="Target as NAME=COMMAND [ARGS...]; repeat for each target, baseline first.",
        ),
        count: Optional[int] = typer.Option(
            None, "--count", "-n", help="Number of workload files to generate."
        ),
        workdir: Optional[Path] = typer.Option(
            None, "--workdir", "-w", help="Directory the workload is generated in."
        ),
        output: Optional[Path] = typer.Option(
            None, "--output", "-o", help="Where to write the JSON report."
        ),
        csv: Optional[Path] = typer.Option(None, "--csv", help="Also export records as CSV."),
        timeout: Optional[float] = typer.Option(
            None, "--timeout", help="Kill a target after this many seconds."
        ),
        memory_mode: Optional[str] = typer.Option(
            None,
            "--memory-mode",
            help="'host' (harness RSS delta) or 'child' (peak RSS of the target).",
        ),
    ) -> None:
        """Generate a workload, run every target once and write a comparison report."""
        try:
            cfg = ctx.load_config(config).apply_overrides(
                build_overrides(
                    targets=target,
                    count=count,
                    workdir=workdir,
                    output=output,
                    csv=csv,
                    timeout=timeout,
                    memory_mode=memory_mode,
                )
            )
            outcome = HarnessOrchestrator(cfg, console=ctx.console).run()
        except HarnessError as exc:
            ctx.error(str(exc))
            raise typer.Exit(1)

        ctx.success(f"Results saved to {outcome.report_path}")
        if outcome.csv_path is not None:
            ctx.info(f"CSV export saved to {outcome.csv_path}")
        for failure in outcome.cleanup_failures:
            ctx.info(f"Could not delete {failure.path}: {failure.message}")
