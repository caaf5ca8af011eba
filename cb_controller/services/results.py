"""Helpers for persisting benchmark reports."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from json import JSONEncoder
from pathlib import Path
from typing import Any

from cb_common.errors import StorageError


logger = logging.getLogger(__name__)


class DateTimeEncoder(JSONEncoder):
    """Custom JSON encoder that handles datetime and path objects."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Path):
            return str(obj)
        return super().default(obj)


def persist_report(report_file: Path, document: dict[str, Any]) -> Path:
    """Write the report atomically (temp file, then replace)."""
    tmp_path = report_file.with_suffix(report_file.suffix + ".tmp")
    try:
        report_file.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(
            json.dumps(document, indent=2, cls=DateTimeEncoder), encoding="utf-8"
        )
        tmp_path.replace(report_file)
    except OSError as exc:
        if tmp_path.exists():
            tmp_path.unlink()
        raise StorageError(
            f"Cannot write report {report_file}: {exc}",
            context={"path": report_file},
            cause=exc,
        ) from exc
    logger.info("Results saved to %s", report_file)
    return report_file


def load_report(report_file: Path) -> dict[str, Any]:
    """Read a persisted report back; the top level must be a JSON object."""
    document = json.loads(report_file.read_text(encoding="utf-8"))
    if not isinstance(document, dict):
        raise StorageError(
            f"Report {report_file} is not a JSON object",
            context={"path": report_file, "type": type(document).__name__},
        )
    results = document.get("results", [])
    summary = document.get("summary", {})
    if (
        not isinstance(results, list)
        or not all(isinstance(entry, dict) for entry in results)
        or not isinstance(summary, dict)
    ):
        raise StorageError(
            f"Report {report_file} has malformed results or summary",
            context={"path": report_file},
        )
    return document
