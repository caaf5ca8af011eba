from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from cb_common.errors import HarnessError
from cb_runner.models.config import HarnessConfig
from cb_ui.cli.context import CLIContext


def create_config_app(ctx: CLIContext) -> typer.Typer:
    """Build the config Typer app, wired to the given context."""
    app = typer.Typer(help="Manage harness configuration files.", no_args_is_help=True)

    @app.command("init")
    def config_init(
        path: Path = typer.Option(
            Path("cbench.yaml"),
            "--path",
            "-p",
            help="Where to write the config (.json, .yaml or .yml).",
        ),
        force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file."),
    ) -> None:
        """Write a config file populated with the built-in defaults."""
        target = path.expanduser()
        if target.exists() and not force:
            ctx.error(f"{target} already exists; use --force to overwrite.")
            raise typer.Exit(1)
        target.parent.mkdir(parents=True, exist_ok=True)
        HarnessConfig().save(target)
        ctx.success(f"Config written to {target}")

    @app.command("show")
    def config_show(
        config: Optional[Path] = typer.Option(
            None, "--config", "-c", help="Config file to load; defaults are shown when omitted."
        ),
    ) -> None:
        """Print the effective configuration (file, then CB_* environment overrides)."""
        try:
            cfg = ctx.load_config(config)
        except HarnessError as exc:
            ctx.error(str(exc))
            raise typer.Exit(1)
        ctx.info(cfg.model_dump_json(indent=2))

    return app
