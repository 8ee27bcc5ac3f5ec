"""Server-side report catalogue, query engine and CSV export."""

from reports.definitions import REPORTS, Column, FilterField, ReportDefinition, get_report, list_reports
from reports.engine import iter_export_rows, run_report
from reports.export import csv_stream, export_filename

__all__ = [
    "REPORTS",
    "Column",
    "FilterField",
    "ReportDefinition",
    "get_report",
    "list_reports",
    "run_report",
    "iter_export_rows",
    "csv_stream",
    "export_filename",
]
