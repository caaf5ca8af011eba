"""Harness configuration (canonical runner/controller definition)."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from cb_common.config.env import parse_float_env, parse_int_env, parse_str_env
from cb_common.errors import ConfigurationError

# Keys already used inside the report ``summary`` object.
RESERVED_TARGET_NAMES = frozenset({"testFilesCount", "speedupRatio"})

MemoryMode = Literal["host", "child"]


class TargetSpec(BaseModel):
    """Immutable descriptor of an executable to benchmark."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Symbolic name used in reports")
    command: str = Field(description="Executable to launch (resolved via PATH)")
    args: tuple[str, ...] = Field(default=(), description="Ordered argument list")
    cwd: Optional[Path] = Field(
        default=None,
        description="Working directory; defaults to the workload directory",
    )
    env: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra environment variables layered over the harness environment",
    )

    @model_validator(mode="after")
    def validate_not_empty(self) -> "TargetSpec":
        if not self.name or not self.name.strip():
            raise ValueError("TargetSpec: 'name' must be non-empty")
        if not self.command or not self.command.strip():
            raise ValueError(f"TargetSpec '{self.name}': 'command' must be non-empty")
        return self

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.args]


def default_targets() -> List[TargetSpec]:
    """The stock comparison: the JS TypeScript compiler against the native port."""
    return [
        TargetSpec(name="tsc", command="npx", args=("tsc", "--noEmit")),
        TargetSpec(name="tsgo", command="npx", args=("tsgo", "--noEmit")),
    ]


class WorkloadConfig(BaseModel):
    """Configuration for synthetic workload generation."""

    # Not range-checked here: the generator owns the count contract.
    count: int = Field(default=25, description="Number of workload artifacts to generate")
    directory: Path = Field(default=Path("."), description="Directory the artifacts are written to")
    file_prefix: str = Field(default="test-file-", description="Artifact file name prefix")
    file_suffix: str = Field(default=".ts", description="Artifact file name suffix")
    template_path: Optional[Path] = Field(
        default=None,
        description="Template file with a $index placeholder; built-in template when unset",
    )
    max_workers: int = Field(default=4, gt=0, description="Parallel writers used during generation")


class RunnerConfig(BaseModel):
    """Configuration for the target runner."""

    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Kill a target after this many seconds; no limit when unset",
    )
    memory_mode: MemoryMode = Field(
        default="host",
        description="'host' samples the harness RSS, 'child' tracks the target's peak RSS",
    )
    sample_interval_seconds: float = Field(
        default=0.05, gt=0, description="Polling interval for child memory sampling"
    )
    max_diagnostic_chars: int = Field(
        default=4000, gt=0, description="Tail of diagnostic output kept in error messages"
    )


class ReportConfig(BaseModel):
    """Configuration for report persistence."""

    output_path: Path = Field(
        default=Path("./benchmark-results.json"), description="Machine-readable report path"
    )
    csv_path: Optional[Path] = Field(default=None, description="Optional CSV export of the records")


class HarnessConfig(BaseModel):
    """Main configuration for a benchmark run."""

    targets: List[TargetSpec] = Field(default_factory=default_targets, description="Targets, baseline first")
    workload: WorkloadConfig = Field(default_factory=WorkloadConfig, description="Workload generation")
    runner: RunnerConfig = Field(default_factory=RunnerConfig, description="Target execution")
    report: ReportConfig = Field(default_factory=ReportConfig, description="Report output")

    @model_validator(mode="after")
    def _validate_targets(self) -> "HarnessConfig":
        names = [t.name for t in self.targets]
        if len(names) != len(set(names)):
            raise ValueError("HarnessConfig: target names must be unique")
        reserved = RESERVED_TARGET_NAMES.intersection(names)
        if reserved:
            raise ValueError(f"HarnessConfig: reserved target names: {sorted(reserved)}")
        return self

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HarnessConfig":
        """Merge a partial mapping onto the built-in defaults."""
        return cls().apply_overrides(data)

    @classmethod
    def load(cls, filepath: Path) -> "HarnessConfig":
        """Load a JSON or YAML config file, merging it onto the defaults."""
        if not filepath.exists():
            raise ConfigurationError(
                f"Configuration file not found: {filepath}", context={"path": filepath}
            )
        try:
            text = filepath.read_text()
            if filepath.suffix.lower() in {".yaml", ".yml"}:
                data = yaml.safe_load(text) or {}
            else:
                data = json.loads(text)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise ConfigurationError(
                f"Cannot read configuration {filepath}: {exc}",
                context={"path": filepath},
                cause=exc,
            ) from exc
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration {filepath} must contain a mapping", context={"path": filepath}
            )
        return cls.from_dict(data)

    def save(self, filepath: Path) -> None:
        if filepath.suffix.lower() in {".yaml", ".yml"}:
            filepath.write_text(yaml.safe_dump(self.model_dump(mode="json"), sort_keys=False))
        else:
            filepath.write_text(self.model_dump_json(indent=2))

    def apply_overrides(self, overrides: Mapping[str, Any]) -> "HarnessConfig":
        """Return a copy with overrides applied field by field.

        ``None`` values keep the current value; nested sections merge
        recursively, lists (such as ``targets``) replace wholesale.
        """
        merged = _merge(self.model_dump(), overrides)
        try:
            return type(self).model_validate(merged)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}", cause=exc) from exc

    def with_env_overrides(self, environ: Mapping[str, str] | None = None) -> "HarnessConfig":
        """Apply ``CB_*`` environment variables on top of this config."""
        env = os.environ if environ is None else environ
        return self.apply_overrides(
            {
                "workload": {
                    "count": parse_int_env(env.get("CB_WORKLOAD_COUNT")),
                    "directory": parse_str_env(env.get("CB_WORKLOAD_DIR")),
                },
                "runner": {
                    "timeout_seconds": parse_float_env(env.get("CB_TIMEOUT_SECONDS")),
                    "memory_mode": parse_str_env(env.get("CB_MEMORY_MODE")),
                },
                "report": {"output_path": parse_str_env(env.get("CB_REPORT_PATH"))},
            }
        )


def _merge(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = _merge(current, value)
        else:
            merged[key] = value
    return merged
