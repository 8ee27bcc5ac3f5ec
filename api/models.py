"""
Pydantic response models for the report API.

Records are returned as free-form dicts because each report has its own
column set; the catalogue endpoint describes those columns.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# ── Report catalogue ──────────────────────────────────────────────────────────

class FilterInfo(BaseModel):
    """A filter a report accepts."""
    key: str = Field(..., description="Query parameter name", examples=["fromDate"])
    kind: str = Field(..., description="str | int | enum | date | month | month_day | date_preset", examples=["date"])
    label: str = Field(..., description="Display label", examples=["From"])
    choices: list[str] = Field(default_factory=list, description="Allowed values for enum and preset filters")
    default: str | None = Field(None, description="Value applied when the filter is omitted", examples=["last-30-days"])


class ColumnInfo(BaseModel):
    key: str = Field(..., description="Record field name", examples=["member_name"])
    label: str = Field(..., description="Column header", examples=["Member Name"])


class ReportInfo(BaseModel):
    """One entry of the report catalogue."""
    report_id: str = Field(..., description="Report identifier used in URLs", examples=["birthday-report"])
    title: str = Field(..., description="Page title", examples=["Birthday Report"])
    section: str = Field(..., description="Report section slug", examples=["client-management"])
    section_label: str = Field(..., description="Report section title", examples=["Client Management"])
    slug: str = Field(..., description="Page slug within the section", examples=["birthday"])
    path: str = Field(..., description="Dashboard path of the report page", examples=["/reports/client-management/birthday"])
    page_size: int = Field(..., description="Rows per page", examples=[20])
    filters: list[FilterInfo] = Field(default_factory=list)
    columns: list[ColumnInfo] = Field(default_factory=list)


# ── Report data ───────────────────────────────────────────────────────────────

class Pagination(BaseModel):
    page: int = Field(..., ge=1, description="Current page (clamped to [1, pages])", examples=[1])
    pages: int = Field(..., ge=1, description="Total pages, at least 1", examples=[3])
    total: int = Field(..., ge=0, description="Total matching records", examples=[47])


class ReportResponse(BaseModel):
    """One page of a report."""
    records: list[dict[str, Any]] = Field(..., description="Rows of this page")
    pagination: Pagination
    summary: dict[str, Any] | None = Field(None, description="Report-specific totals over all pages")


class ReportEnvelope(BaseModel):
    success: bool = Field(True, description="Always true for 2xx responses")
    data: ReportResponse


# ── Navigation ────────────────────────────────────────────────────────────────

class BreadcrumbOut(BaseModel):
    """One step of a breadcrumb trail."""
    label: str = Field(..., description="Display label", examples=["Reports"])
    to: str | None = Field(None, description="Link target; null for the current page", examples=["/reports"])


# ── Error model ───────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Standard error response body."""
    error: str = Field(..., description="Short error category", examples=["Bad request"])
    detail: str | None = Field(None, description="Extended error detail")
    status_code: int = Field(..., ge=400, le=599, description="HTTP status code", examples=[400])
