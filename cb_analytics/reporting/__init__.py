"""Report rendering and export."""

from cb_analytics.reporting.emitter import build_document, render, render_text
from cb_analytics.reporting.export import records_to_frame, save_to_csv

__all__ = ["build_document", "records_to_frame", "render", "render_text", "save_to_csv"]
