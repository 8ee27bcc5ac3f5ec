"""
Report endpoints.

GET /api/v1/reports                       → report catalogue
GET /api/v1/reports/{report_id}           → one page of a report
GET /api/v1/reports/{report_id}/export    → every filtered row as CSV

Filters are passed as plain query parameters named after the report's
declared filter keys (``fromDate``, ``branchId``, ``birthdayMonth`` ...).
"all" and "" mean "no filter"; undeclared keys are ignored.  A malformed
value for a declared filter is a 400.
"""

import logging
import sqlite3
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import StreamingResponse

from api.database import get_db
from api.models import ReportEnvelope, ReportInfo
from reports.definitions import ReportDefinition, get_report, list_reports
from reports.engine import iter_export_rows, run_report
from reports.export import csv_stream, export_filename, filename_qualifiers
from utils.config import AppConfig

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])

_cfg = AppConfig.from_env()

# Query parameters that are never report filters.
_RESERVED_PARAMS = frozenset({"page", "limit"})


def _today() -> date:
    return date.today()


def _definition(report_id: str) -> ReportDefinition:
    definition = get_report(report_id)
    if definition is None:
        raise HTTPException(status_code=404, detail=f"Report '{report_id}' not found")
    return definition


def _query_filters(request: Request) -> dict[str, Any]:
    """Collect filter values from the query string (last value wins)."""
    return {
        k: v for k, v in request.query_params.items()
        if k not in _RESERVED_PARAMS
    }


@router.get(
    "",
    response_model=list[ReportInfo],
    summary="List available reports",
)
def report_catalogue() -> list[dict]:
    """Return every report with its section, filters and columns."""
    return [r.describe(_cfg.default_page_size) for r in list_reports()]


@router.get(
    "/{report_id}",
    response_model=ReportEnvelope,
    summary="Fetch one page of a report",
)
def fetch_report(
    report_id: str,
    request: Request,
    page: int = Query(1, description="1-based page; clamped to the available range"),
    limit: int | None = Query(None, ge=1, le=500, description="Rows per page (default: APP_DEFAULT_PAGE_SIZE)"),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict:
    """Return ``{success, data: {records, pagination, summary}}``."""
    definition = _definition(report_id)
    data = run_report(
        conn,
        definition,
        _query_filters(request),
        page=page,
        page_size=limit or definition.page_size or _cfg.default_page_size,
        today=_today(),
    )
    return {"success": True, "data": data}


@router.get("/{report_id}/export", summary="Export a report as CSV")
def export_report(
    report_id: str,
    request: Request,
    conn: sqlite3.Connection = Depends(get_db),
) -> StreamingResponse:
    """Stream every row matching the filters as CSV (no pagination)."""
    definition = _definition(report_id)
    filters = _query_filters(request)
    today = _today()
    total, rows = iter_export_rows(
        conn, definition, filters,
        limit=_cfg.export_max_rows, today=today,
    )
    filename = export_filename(
        definition.report_id, today, filename_qualifiers(definition, filters)
    )
    # Read rows now: the request connection may close before the body streams.
    records = list(rows)
    logger.info("export report=%s rows=%d file=%s", report_id, total, filename)
    return StreamingResponse(
        csv_stream(definition.columns, records),
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={filename}",
            "X-Total-Count": str(total),
        },
    )
