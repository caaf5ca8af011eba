"""Execution engine: target runner and memory sampling."""

from cb_runner.engine.memory import ChildMemoryTracker, host_rss_bytes
from cb_runner.engine.runner import TargetRunner

__all__ = ["ChildMemoryTracker", "TargetRunner", "host_rss_bytes"]
