"""
Command-line interface for compiler-bench.

Benchmarks external compiler executables against a generated workload and
writes a comparison report.
"""

from __future__ import annotations

import typer

from cb_common.logging import configure_logging
from cb_ui.cli.commands.config import create_config_app
from cb_ui.cli.commands.diagnostics import register_diagnostics_command
from cb_ui.cli.commands.report import register_show_command
from cb_ui.cli.commands.run import register_run_command
from cb_ui.cli.context import CLIContext

ctx_store = CLIContext()

app = typer.Typer(
    help="Compare compiler executables on a synthetic workload.", no_args_is_help=True
)


@app.callback()
def entry(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    log_json: bool = typer.Option(False, "--log-json", help="Emit logs as JSON lines."),
) -> None:
    """Global options shared by every command."""
    configure_logging(debug=verbose, json=log_json or None, force=True)


register_run_command(app, ctx_store)
register_diagnostics_command(app, ctx_store)
register_show_command(app, ctx_store)
app.add_typer(create_config_app(ctx_store), name="config")


def main() -> None:
    """Console script entrypoint (Typer app)."""
    app()


if __name__ == "__main__":
    main()
