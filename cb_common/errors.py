"""Shared error taxonomy for compiler-bench."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar


def _normalize_context_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return normalize_context(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_context_value(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def normalize_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Return a JSON-friendly copy of an error context mapping."""
    return {key: _normalize_context_value(val) for key, val in context.items()}


class HarnessError(Exception):
    """Base error type for typed failure handling."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.context = normalize_context(context or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def error_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.error_type, "message": str(self), "context": self.context}


class InvalidArgumentError(HarnessError):
    """Caller supplied a malformed request; raised before any work is done."""


class StorageError(HarnessError):
    """Failure writing or deleting files (workload artifacts, reports)."""


class ConfigurationError(HarnessError):
    """Failure due to invalid configuration."""


class TargetError(HarnessError):
    """Failure of a single target run, recorded as data rather than raised."""


class LaunchError(TargetError):
    """The target executable could not be started."""


class NonZeroExitError(TargetError):
    """The target ran but exited with a failure status."""


class TargetTimeoutError(TargetError):
    """The target exceeded its time budget and was killed."""


class AggregationInconsistencyError(HarnessError):
    """Internal invariant violation while aggregating measurement records."""


T = TypeVar("T", bound=HarnessError)


def wrap_error(
    error_cls: type[T],
    message: str,
    *,
    context: Mapping[str, Any] | None = None,
    cause: Exception | None = None,
) -> T:
    """Create a typed HarnessError with optional context and cause."""
    return error_cls(message, context=context, cause=cause)


def error_to_payload(error: HarnessError) -> dict[str, Any]:
    """Convert a HarnessError to a log/report payload."""
    return {
        "error_type": error.error_type,
        "error": str(error),
        "error_context": error.context,
    }
