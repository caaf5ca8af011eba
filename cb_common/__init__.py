"""Shared helpers for compiler-bench."""

from cb_common.api import HarnessError, configure_logging

__all__ = ["configure_logging", "HarnessError"]
