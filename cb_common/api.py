"""Public API surface for cb_common."""

from cb_common.errors import (
    AggregationInconsistencyError,
    ConfigurationError,
    HarnessError,
    InvalidArgumentError,
    LaunchError,
    NonZeroExitError,
    StorageError,
    TargetError,
    TargetTimeoutError,
    error_to_payload,
)
from cb_common.logging import configure_logging

__all__ = [
    "AggregationInconsistencyError",
    "ConfigurationError",
    "HarnessError",
    "InvalidArgumentError",
    "LaunchError",
    "NonZeroExitError",
    "StorageError",
    "TargetError",
    "TargetTimeoutError",
    "configure_logging",
    "error_to_payload",
]
