"""Typer application for compiler-bench."""

from cb_ui.cli.main import app, main

__all__ = ["app", "main"]
