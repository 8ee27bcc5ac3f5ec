"""
Report query engine.

Turns a ``ReportDefinition`` plus the caller's filters into the paginated
report envelope every dashboard page consumes:

    {
        "records": [...],
        "pagination": {"page": 1, "pages": 3, "total": 47},
        "summary": {...} | None,
    }

The requested page is clamped into [1, pages] so a stale page number never
produces an empty page when data exists.  Filter errors surface as
ValueError, which the API turns into a 400.
"""

import logging
import sqlite3
import time
from collections.abc import Iterator, Mapping
from datetime import date
from typing import Any

from reports.definitions import ReportDefinition
from utils.pagination import DEFAULT_PAGE_SIZE, PageWindow, page_offset
from utils.query import build_where_clause

logger = logging.getLogger(__name__)

_FETCH_BATCH = 500


def _where(definition: ReportDefinition, filters: Mapping[str, Any] | None,
           today: date | None) -> tuple[str, list[Any]]:
    return build_where_clause(
        definition.conditions(filters, today),
        definition.base_conditions,
    )


def _base_sql(definition: ReportDefinition, where: str) -> str:
    sql = f"SELECT {definition.select} FROM {definition.source} {where}"
    if definition.group_by:
        sql += f" GROUP BY {definition.group_by}"
    return sql


def count_rows(conn: sqlite3.Connection, definition: ReportDefinition,
               where: str, params: list[Any]) -> int:
    """Number of output rows (groups, for grouped reports)."""
    if definition.group_by:
        sql = f"SELECT COUNT(*) FROM ({_base_sql(definition, where)})"
    else:
        sql = f"SELECT COUNT(*) FROM {definition.source} {where}"
    return conn.execute(sql, params).fetchone()[0]


def _summary(conn: sqlite3.Connection, definition: ReportDefinition,
             where: str, params: list[Any]) -> dict[str, Any] | None:
    if not definition.summary:
        return None
    row = conn.execute(
        f"SELECT {definition.summary} FROM {definition.source} {where}", params
    ).fetchone()
    return dict(row) if row is not None else None


def _ordered_sql(definition: ReportDefinition, where: str) -> str:
    sql = _base_sql(definition, where)
    if definition.order_by:
        sql += f" ORDER BY {definition.order_by}"
    return sql


def run_report(
    conn: sqlite3.Connection,
    definition: ReportDefinition,
    filters: Mapping[str, Any] | None = None,
    page: int = 1,
    page_size: int | None = None,
    today: date | None = None,
) -> dict[str, Any]:
    """Run one page of a report.

    Args:
        conn: Open connection with ``row_factory = sqlite3.Row``.
        definition: The report to run.
        filters: Raw query filters; sentinels and unknown keys are ignored.
        page: Requested 1-based page (clamped).
        page_size: Rows per page (defaults to the report's own size, then 20).
        today: Reference date for relative date presets.

    Raises:
        ValueError: if a filter value is malformed.
    """
    size = page_size or definition.page_size or DEFAULT_PAGE_SIZE
    start = time.monotonic()
    where, params = _where(definition, filters, today)

    total = count_rows(conn, definition, where, params)
    window = PageWindow.for_total(page, total, size)

    sql = _ordered_sql(definition, where) + " LIMIT ? OFFSET ?"
    rows = conn.execute(
        sql, params + [size, page_offset(window.page, size)]
    ).fetchall()

    result = {
        "records": [dict(r) for r in rows],
        "pagination": {
            "page": window.page,
            "pages": window.pages,
            "total": total,
        },
        "summary": _summary(conn, definition, where, params),
    }
    logger.debug(
        "report=%s page=%d/%d total=%d duration_ms=%.1f",
        definition.report_id, window.page, window.pages, total,
        (time.monotonic() - start) * 1000,
    )
    return result


def iter_export_rows(
    conn: sqlite3.Connection,
    definition: ReportDefinition,
    filters: Mapping[str, Any] | None = None,
    limit: int | None = None,
    today: date | None = None,
) -> tuple[int, Iterator[sqlite3.Row]]:
    """Count and lazily yield every row matching the filters.

    Filters are validated before this returns, so a malformed value raises
    ValueError up front rather than midway through a streamed response.

    Returns:
        (total_count, row_iterator); the iterator is capped at ``limit``.
    """
    where, params = _where(definition, filters, today)
    total = count_rows(conn, definition, where, params)
    sql = _ordered_sql(definition, where)
    query_params = list(params)
    if limit is not None:
        sql += " LIMIT ?"
        query_params.append(limit)

    def _iter_rows() -> Iterator[sqlite3.Row]:
        cur = conn.execute(sql, query_params)
        while True:
            batch = cur.fetchmany(_FETCH_BATCH)
            if not batch:
                break
            yield from batch

    if limit is not None and total > limit:
        logger.warning(
            "export of %s truncated to %d of %d rows",
            definition.report_id, limit, total,
        )
    return total, _iter_rows()
