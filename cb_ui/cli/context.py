"""Shared state for CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from cb_runner.models.config import HarnessConfig

DEFAULT_CONFIG_CANDIDATES = ("cbench.yaml", "cbench.yml", "cbench.json")


@dataclass
class CLIContext:
    """Container for consoles and config resolution, initialized lazily."""

    _console: Optional[Console] = None
    _err_console: Optional[Console] = None

    @property
    def console(self) -> Console:
        if self._console is None:
            self._console = Console()
        return self._console

    @console.setter
    def console(self, value: Console) -> None:
        self._console = value

    @property
    def err_console(self) -> Console:
        if self._err_console is None:
            self._err_console = Console(stderr=True)
        return self._err_console

    @err_console.setter
    def err_console(self, value: Console) -> None:
        self._err_console = value

    def resolve_config_path(self, config_path: Optional[Path]) -> Optional[Path]:
        """Explicit path first, then the first default file found in the cwd."""
        if config_path is not None:
            return config_path.expanduser()
        for candidate in DEFAULT_CONFIG_CANDIDATES:
            path = Path(candidate)
            if path.exists():
                return path
        return None

    def load_config(self, config_path: Optional[Path]) -> HarnessConfig:
        """Load config (or defaults) with ``CB_*`` environment overrides applied."""
        resolved = self.resolve_config_path(config_path)
        cfg = HarnessConfig.load(resolved) if resolved else HarnessConfig()
        return cfg.with_env_overrides()

    def error(self, message: str) -> None:
        self.err_console.print(
            f"[bold red]Error:[/bold red] {escape(message)}", highlight=False, soft_wrap=True
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]{escape(message)}[/green]", highlight=False, soft_wrap=True)

    def info(self, message: str) -> None:
        self.console.print(message, markup=False, highlight=False, emoji=False, soft_wrap=True)
