"""Controller-side services."""

from cb_controller.services.results import DateTimeEncoder, load_report, persist_report

__all__ = ["DateTimeEncoder", "load_report", "persist_report"]
