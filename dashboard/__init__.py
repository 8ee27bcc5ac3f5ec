"""Dashboard-side report client and page controllers."""

from dashboard.client import ReportClient, ReportClientError, ReportExportError, ReportFetchError
from dashboard.download import save_bytes, scoped_download
from dashboard.page import PageState, ReportPage

__all__ = [
    "ReportClient",
    "ReportClientError",
    "ReportExportError",
    "ReportFetchError",
    "PageState",
    "ReportPage",
    "save_bytes",
    "scoped_download",
]
