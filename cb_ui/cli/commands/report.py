from __future__ import annotations

from pathlib import Path

import typer

from cb_common.errors import HarnessError
from cb_controller.services.results import load_report
from cb_ui.cli.commands.run_helpers import build_results_table
from cb_ui.cli.context import CLIContext


def register_show_command(app: typer.Typer, ctx: CLIContext) -> None:
    """Register the command that renders a persisted report."""

    @app.command("show")
    def show(
        report: Path = typer.Argument(
            Path("./benchmark-results.json"), help="JSON report written by `cbench run`."
        ),
    ) -> None:
        """Display a saved benchmark report."""
        try:
            document = load_report(report)
        except (OSError, ValueError, HarnessError) as exc:
            ctx.error(f"Cannot read report {report}: {exc}")
            raise typer.Exit(1)

        ctx.console.print(build_results_table(document.get("results", [])))
        summary = document.get("summary", {})
        ctx.info(f"Generated: {document.get('timestamp', 'unknown')}")
        ctx.info(f"Workload files: {summary.get('testFilesCount', 'unknown')}")
        ratio = summary.get("speedupRatio")
        if isinstance(ratio, (int, float)):
            ctx.info(f"Speedup ratio: {ratio:.2f}")
