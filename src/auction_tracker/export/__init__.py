"""Spreadsheet export helpers."""

from .workbook import (
    RESULTS_HEADERS,
    STATUS_LABELS,
    ExportError,
    ExportSheets,
    build_export,
    export_filename,
    export_results_csv,
    safe_export_filename,
    save_workbook,
    write_workbook,
)

__all__ = [
    "RESULTS_HEADERS",
    "STATUS_LABELS",
    "ExportError",
    "ExportSheets",
    "build_export",
    "export_filename",
    "export_results_csv",
    "safe_export_filename",
    "save_workbook",
    "write_workbook",
]
