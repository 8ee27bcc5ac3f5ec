"""
HTTP client for the report API.

``ReportClient`` is the dashboard's side of the report contract: it strips
"no filter" sentinels, sends one request per call and raises a
``ReportClientError`` subclass on any network or server failure.  It never
retries; the user decides whether to search again.
"""

import logging
from collections.abc import Mapping
from pathlib import PurePosixPath
from typing import Any

import requests

from utils.config import AppConfig
from utils.http import SessionManager
from utils.patterns import CONTENT_DISPOSITION_FILENAME
from utils.query import clean_filters

logger = logging.getLogger(__name__)


def attachment_filename(header: Any) -> str | None:
    """Bare filename from a Content-Disposition header, or None.

    Directory parts are stripped so the name is safe to join to a
    destination directory.
    """
    if not isinstance(header, str):
        return None
    match = CONTENT_DISPOSITION_FILENAME.search(header)
    if not match:
        return None
    name = PurePosixPath(match.group(1).strip().replace("\\", "/")).name
    return name if name not in ("", ".", "..") else None


class ReportClientError(Exception):
    """Base class for report API failures."""

    def __init__(self, message: str, status_code: int | None = None,
                 detail: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ReportFetchError(ReportClientError):
    """A report page could not be fetched."""


class ReportExportError(ReportClientError):
    """A report export could not be downloaded."""


def _error_detail(response: Any) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return (response.text or "").strip() or None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error")
        return str(detail) if detail is not None else None
    return None


class ReportClient:
    """Client for ``/reports`` endpoints of the report API.

    Args:
        base_url: API root including the version prefix
            (default: REPORTS_API_BASE).
        session: Object with a requests-style ``get``; a pooled session
            without retries is created when omitted.
        timeout: Per-request timeout in seconds (default: REPORTS_API_TIMEOUT).
    """

    def __init__(self, base_url: str | None = None, session: Any = None,
                 timeout: float | None = None):
        cfg = AppConfig.from_env()
        self.base_url = (base_url or cfg.reports_api_base).rstrip("/")
        self.timeout = timeout if timeout is not None else cfg.reports_api_timeout
        self._manager: SessionManager | None = None
        if session is None:
            self._manager = SessionManager(headers={"Accept": "application/json"})
            session = self._manager.session
        self.session = session

    def close(self) -> None:
        if self._manager is not None:
            self._manager.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _get(self, path: str, params: Mapping[str, Any], error_cls: type[ReportClientError]):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=dict(params), timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("request to %s failed: %s", url, exc)
            raise error_cls(f"Could not reach report server: {exc}") from exc
        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.warning("request to %s returned %d: %s",
                           url, response.status_code, detail)
            raise error_cls(
                f"Report server returned {response.status_code}",
                status_code=response.status_code,
                detail=detail,
            )
        return response

    def list_reports(self) -> list[dict]:
        """Return the report catalogue."""
        return self._get("/reports", {}, ReportFetchError).json()

    def fetch_report(self, report_id: str, filters: Mapping[str, Any] | None = None,
                     page: int = 1, page_size: int | None = None) -> dict:
        """Fetch one page of a report.

        Sentinel filter values ("all", "") are not sent.

        Returns:
            ``{"records": [...], "pagination": {...}, "summary": ...}``

        Raises:
            ReportFetchError: on network failure, an error status or a
                malformed response body.
        """
        params: dict[str, Any] = clean_filters(filters)
        params["page"] = page
        if page_size is not None:
            params["limit"] = page_size
        response = self._get(f"/reports/{report_id}", params, ReportFetchError)
        try:
            data = response.json()["data"]
        except (ValueError, KeyError, TypeError) as exc:
            raise ReportFetchError(
                "Malformed report response", status_code=response.status_code
            ) from exc
        if not isinstance(data, dict) or not {"records", "pagination"} <= data.keys():
            raise ReportFetchError(
                "Malformed report response", status_code=response.status_code
            )
        return data

    def export_report(self, report_id: str,
                      filters: Mapping[str, Any] | None = None) -> bytes:
        """Download the CSV export of a report (no pagination).

        Raises:
            ReportExportError: on network failure or an error status.
        """
        content, _ = self.download_export(report_id, filters)
        return content

    def download_export(self, report_id: str,
                        filters: Mapping[str, Any] | None = None) -> tuple[bytes, str | None]:
        """Like ``export_report``, also returning the server's filename.

        The filename comes from ``Content-Disposition`` and is None when the
        header is missing or names no usable file.
        """
        response = self._get(
            f"/reports/{report_id}/export", clean_filters(filters), ReportExportError
        )
        headers = getattr(response, "headers", None) or {}
        return response.content, attachment_filename(headers.get("Content-Disposition"))

    def breadcrumbs(self, path: str) -> list[dict]:
        return self._get("/breadcrumbs", {"path": path}, ReportFetchError).json()
