"""Memory sampling helpers built on psutil."""

from __future__ import annotations

import logging

import psutil


logger = logging.getLogger(__name__)


def host_rss_bytes() -> int:
    """Resident set size of the harness process itself."""
    return int(psutil.Process().memory_info().rss)


class ChildMemoryTracker:
    """Track the peak RSS of a child process and its descendants."""

    def __init__(self, pid: int):
        self.pid = pid
        self.peak = 0
        self.samples = 0
        try:
            self._process: psutil.Process | None = psutil.Process(pid)
        except psutil.NoSuchProcess:
            self._process = None

    def poll(self) -> int:
        """Take one sample; returns the current tree RSS (0 once the child is gone)."""
        if self._process is None:
            return 0
        total = 0
        try:
            tree = [self._process, *self._process.children(recursive=True)]
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            return 0
        for proc in tree:
            try:
                total += proc.memory_info().rss
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
        self.samples += 1
        if total > self.peak:
            self.peak = total
        return total


def kill_process_tree(pid: int) -> None:
    """Kill a process and every descendant still alive."""
    try:
        parent = psutil.Process(pid)
        victims = [*parent.children(recursive=True), parent]
    except psutil.NoSuchProcess:
        return
    for proc in victims:
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            continue
        except psutil.AccessDenied as exc:
            logger.warning("Cannot kill process %s: %s", proc.pid, exc)
    psutil.wait_procs(victims, timeout=5)
