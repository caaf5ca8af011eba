"""Tabular export of measurement records."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import pandas as pd

from cb_common.errors import StorageError
from cb_runner.models.records import MeasurementRecord


logger = logging.getLogger(__name__)

COLUMNS = [
    "target",
    "success",
    "duration_ms",
    "memory_delta_bytes",
    "exit_code",
    "error_type",
    "error_message",
]


def records_to_frame(records: Sequence[MeasurementRecord]) -> pd.DataFrame:
    """One row per record, indexed by target name, in run order."""
    rows = [
        {
            "target": r.target,
            "success": r.success,
            "duration_ms": r.duration_ms,
            "memory_delta_bytes": r.memory_delta_bytes,
            "exit_code": r.exit_code,
            "error_type": r.error_type,
            "error_message": r.error_message,
        }
        for r in records
    ]
    df = pd.DataFrame(rows, columns=COLUMNS)
    return df.set_index("target")


def save_to_csv(records: Sequence[MeasurementRecord], csv_path: Path) -> Path:
    """
    Save the records to CSV.

    Args:
        records: Measurement records of one run
        csv_path: Destination file
    """
    try:
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        records_to_frame(records).to_csv(csv_path)
    except OSError as exc:
        raise StorageError(
            f"Cannot write CSV export {csv_path}: {exc}", context={"path": csv_path}, cause=exc
        ) from exc
    logger.info("Measurement records saved to CSV at %s", csv_path)
    return csv_path
