"""Reporting utilities for exporting the prayer-time statistics."""

from .exporters import (
    build_pdf_report,
    export_excel_report,
    export_filename,
    export_json_report,
    format_stats_for_export,
)

__all__ = [
    "build_pdf_report",
    "export_excel_report",
    "export_filename",
    "export_json_report",
    "format_stats_for_export",
]
