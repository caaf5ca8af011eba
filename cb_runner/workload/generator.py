"""
Workload generator for compiler benchmarks.

Writes a configurable number of synthetic source files into a directory so
that targets can discover them by location, and removes them afterwards.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from string import Template
from typing import Iterable, List, Optional

from cb_common.errors import InvalidArgumentError, StorageError
from cb_runner.models.config import WorkloadConfig
from cb_runner.models.records import WorkloadArtifact
from cb_runner.workload.templates import DEFAULT_TEMPLATE, render_artifact


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupFailure:
    """An artifact that could not be deleted."""

    path: Path
    message: str


class WorkloadGenerator:
    """Generate and delete synthetic workload artifacts."""

    def __init__(self, config: Optional[WorkloadConfig] = None):
        """
        Initialize the generator.

        Args:
            config: Workload configuration; defaults are used when omitted
        """
        self.config = config or WorkloadConfig()

    def artifact_path(self, index: int) -> Path:
        """Return the storage location for artifact ``index``."""
        name = f"{self.config.file_prefix}{index}{self.config.file_suffix}"
        return self.config.directory / name

    def generate(self, count: int) -> tuple[WorkloadArtifact, ...]:
        """
        Write ``count`` artifacts and return them in index order.

        Args:
            count: Number of artifacts, must be >= 1

        Returns:
            Tuple of written artifacts

        Raises:
            InvalidArgumentError: If count is not a positive integer
            StorageError: If any write fails; artifacts already written by
                this call are deleted first
        """
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise InvalidArgumentError(
                f"Workload count must be a positive integer, got {count!r}",
                context={"count": count},
            )

        template = self._load_template()
        try:
            self.config.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                f"Cannot create workload directory {self.config.directory}: {exc}",
                context={"directory": self.config.directory},
                cause=exc,
            ) from exc

        logger.info("Generating %s workload artifacts in %s", count, self.config.directory)
        workers = min(self.config.max_workers, count)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="workload") as executor:
            futures = [
                executor.submit(self._write_artifact, template, index)
                for index in range(count)
            ]
        # The executor has drained every future by now; collect in index order.
        artifacts: List[WorkloadArtifact] = []
        failures: List[tuple[int, BaseException]] = []
        for index, future in enumerate(futures):
            exc = future.exception()
            if exc is None:
                artifacts.append(future.result())
            else:
                failures.append((index, exc))

        if failures:
            index, first = failures[0]
            logger.error(
                "Workload generation failed for %s of %s artifacts; rolling back",
                len(failures),
                count,
            )
            self.cleanup(artifacts)
            raise StorageError(
                f"Failed to write workload artifact {self.artifact_path(index)}: {first}",
                context={"index": index, "failed": len(failures), "count": count},
                cause=first if isinstance(first, Exception) else None,
            )

        logger.info("Generated %s workload artifacts", count)
        return tuple(artifacts)

    def cleanup(self, artifacts: Iterable[WorkloadArtifact]) -> list[CleanupFailure]:
        """
        Delete artifacts, continuing past individual failures.

        Returns:
            One entry per artifact that could not be deleted
        """
        failures: list[CleanupFailure] = []
        removed = 0
        for artifact in artifacts:
            try:
                artifact.path.unlink()
                removed += 1
            except OSError as exc:
                logger.warning("Failed to delete %s: %s", artifact.path, exc)
                failures.append(CleanupFailure(path=artifact.path, message=str(exc)))
        logger.info("Removed %s workload artifacts (%s failures)", removed, len(failures))
        return failures

    def _write_artifact(self, template: Template, index: int) -> WorkloadArtifact:
        path = self.artifact_path(index)
        # Only a file this call managed to open may be discarded on failure.
        handle = path.open("w", encoding="utf-8")
        try:
            try:
                handle.write(render_artifact(template, index))
            finally:
                handle.close()
        except OSError:
            self._discard_partial(path)
            raise
        return WorkloadArtifact(index=index, path=path)

    def _load_template(self) -> Template:
        template_path = self.config.template_path
        if template_path is None:
            return DEFAULT_TEMPLATE
        try:
            return Template(template_path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise StorageError(
                f"Cannot read workload template {template_path}: {exc}",
                context={"template_path": template_path},
                cause=exc,
            ) from exc

    @staticmethod
    def _discard_partial(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.debug("Could not remove partial artifact %s: %s", path, exc)
