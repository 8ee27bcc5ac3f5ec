"""
Report definitions: the typed filters, columns and SQL of every report.

Each report is a specialisation of the same contract: a declared set of
filters, a record shape, an optional summary row, and a CSV export of the
full filtered set.  Adding a report means adding one ``ReportDefinition``
to ``REPORTS``; the engine and routes need no changes.

Filter kinds:
    str          exact match (or LIKE with op="like")
    int          integer match
    enum         one of ``choices``
    date         YYYY-MM-DD compared with op gte / lte
    month        1..12 compared against a month-number column expression
    month_day    YYYY-MM-DD reduced to MM-DD, for birthday windows
    date_preset  one of utils.dates.DATE_PRESETS, expanded to a BETWEEN range
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping

from reports.catalog import report_label, section_label
from utils.dates import DATE_PRESETS, parse_iso_date, resolve_date_preset
from utils.pagination import DEFAULT_PAGE_SIZE
from utils.patterns import ISO_DATE
from utils.query import clean_filters

_OPERATORS = {
    "eq": "{col} = ?",
    "gte": "{col} >= ?",
    "lte": "{col} <= ?",
    "like": "{col} LIKE ?",
    "between": "{col} BETWEEN ? AND ?",
}

FILTER_KINDS = frozenset({"str", "int", "enum", "date", "month",
                          "month_day", "date_preset"})


@dataclass(frozen=True)
class FilterField:
    """One recognised filter of a report.

    ``key`` is the query-string name used by the dashboard (camelCase, as in
    ``fromDate`` or ``branchId``); ``column`` is the SQL expression it
    constrains.
    """

    key: str
    column: str
    kind: str = "str"
    op: str = "eq"
    label: str = ""
    choices: tuple[str, ...] = ()
    default: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in FILTER_KINDS:
            raise ValueError(f"Unknown filter kind '{self.kind}' for {self.key}")
        if self.op not in _OPERATORS:
            raise ValueError(f"Unknown filter op '{self.op}' for {self.key}")

    def coerce(self, raw: Any, today: date | None = None) -> list[Any]:
        """Convert a raw query value into SQL parameters.

        Raises:
            ValueError: if the value is malformed for this filter's kind.
        """
        text = str(raw).strip()
        if self.kind == "int":
            try:
                return [int(text)]
            except ValueError:
                raise ValueError(f"{self.key} must be an integer, got '{raw}'") from None
        if self.kind == "enum":
            if text not in self.choices:
                raise ValueError(
                    f"{self.key} must be one of: {', '.join(self.choices)}"
                )
            return [text]
        if self.kind in ("date", "month_day"):
            if not ISO_DATE.match(text):
                raise ValueError(f"Invalid date for {self.key}: '{raw}'. Expected YYYY-MM-DD")
            d = parse_iso_date(text)
            return [d.isoformat() if self.kind == "date" else d.strftime("%m-%d")]
        if self.kind == "month":
            try:
                month = int(text)
            except ValueError:
                month = 0
            if not 1 <= month <= 12:
                raise ValueError(f"{self.key} must be a month number 1-12, got '{raw}'")
            return [month]
        if self.kind == "date_preset":
            if text not in DATE_PRESETS:
                raise ValueError(
                    f"{self.key} must be one of: {', '.join(DATE_PRESETS)}"
                )
            start, end = resolve_date_preset(text, today)
            return [start.isoformat(), end.isoformat()]
        if self.op == "like":
            return [f"%{text}%"]
        return [text]

    def condition(self, raw: Any, today: date | None = None) -> tuple[str, list[Any]]:
        """Return the (sql_fragment, params) pair for a raw value."""
        op = "between" if self.kind == "date_preset" else self.op
        return _OPERATORS[op].format(col=self.column), self.coerce(raw, today)

    def describe(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "kind": self.kind,
            "label": self.label or self.key,
            "choices": list(self.choices) or (
                list(DATE_PRESETS) if self.kind == "date_preset" else []
            ),
            "default": self.default,
        }


@dataclass(frozen=True)
class Column:
    """One output column; ``key`` matches an alias in the report's SELECT."""

    key: str
    label: str
    kind: str = "text"          # text | amount | count | date


@dataclass(frozen=True)
class ReportDefinition:
    """The query shape of one report."""

    report_id: str
    section: str
    slug: str
    source: str
    select: str
    columns: tuple[Column, ...]
    filters: tuple[FilterField, ...] = ()
    base_conditions: tuple[str, ...] = ()
    group_by: str | None = None
    order_by: str | None = None
    summary: str | None = None
    page_size: int | None = None       # None: the server-wide default
    filename_filters: tuple[str, ...] = ()
    _filter_index: dict = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._filter_index.update({f.key: f for f in self.filters})

    @property
    def title(self) -> str:
        return report_label(self.section, self.slug) or self.report_id

    @property
    def section_label(self) -> str:
        return section_label(self.section)

    @property
    def path(self) -> str:
        """Dashboard path of this report's page."""
        return f"/reports/{self.section}/{self.slug}"

    def filter(self, key: str) -> FilterField | None:
        return self._filter_index.get(key)

    def applied_filters(self, filters: Mapping[str, Any] | None) -> dict[str, Any]:
        """Recognised, non-sentinel filters plus declared defaults.

        Unknown keys are dropped.
        """
        cleaned = clean_filters(filters)
        applied: dict[str, Any] = {}
        for f in self.filters:
            if f.key in cleaned:
                applied[f.key] = cleaned[f.key]
            elif f.default is not None:
                applied[f.key] = f.default
        return applied

    def conditions(self, filters: Mapping[str, Any] | None,
                   today: date | None = None) -> list[tuple[str, list[Any]]]:
        """SQL conditions for the applied filters (raises ValueError).

        A month-day window whose start falls after its end wraps over the
        new year ("12-20" to "01-10") and matches either side of it.
        """
        conditions: list[tuple[str, list[Any]]] = []
        window_from: dict[str, tuple[int, Any]] = {}
        window_to: dict[str, tuple[int, Any]] = {}
        for key, value in self.applied_filters(filters).items():
            f = self._filter_index[key]
            sql, params = f.condition(value, today)
            if f.kind == "month_day" and f.op in ("gte", "lte"):
                bounds = window_from if f.op == "gte" else window_to
                bounds[f.column] = (len(conditions), params[0])
            conditions.append((sql, params))

        wrapped = []
        for column, (lo_index, lo) in window_from.items():
            if column in window_to and lo > window_to[column][1]:
                hi_index, hi = window_to[column]
                conditions[lo_index] = (f"({column} >= ? OR {column} <= ?)", [lo, hi])
                wrapped.append(hi_index)
        return [c for i, c in enumerate(conditions) if i not in wrapped]

    def describe(self, default_page_size: int = DEFAULT_PAGE_SIZE) -> dict[str, Any]:
        return {
            "report_id": self.report_id,
            "title": self.title,
            "section": self.section,
            "section_label": self.section_label,
            "slug": self.slug,
            "path": self.path,
            "page_size": self.page_size or default_page_size,
            "filters": [f.describe() for f in self.filters],
            "columns": [{"key": c.key, "label": c.label} for c in self.columns],
        }


# ── Shared filter declarations ───────────────────────────────────────────────

def _date_range(column: str) -> tuple[FilterField, FilterField]:
    return (
        FilterField("fromDate", column, kind="date", op="gte", label="From"),
        FilterField("toDate", column, kind="date", op="lte", label="To"),
    )


def _branch(column: str) -> FilterField:
    return FilterField("branchId", column, label="Branch")


def _staff(column: str, label: str = "Staff") -> FilterField:
    return FilterField("staffId", column, label=label)


_PAYMENT_MODES = ("cash", "card", "upi", "bank_transfer", "cheque", "razorpay")


# ── Report registry ──────────────────────────────────────────────────────────

_REPORT_LIST: tuple[ReportDefinition, ...] = (
    # Finance
    ReportDefinition(
        report_id="collection",
        section="finance",
        slug="collection",
        source=(
            "payments p "
            "LEFT JOIN members m ON m.id = p.member_id "
            "LEFT JOIN invoices i ON i.id = p.invoice_id "
            "LEFT JOIN staff s ON s.id = p.collected_by"
        ),
        select=(
            "date(p.paid_at) AS paid_on, p.receipt_number, i.invoice_number, "
            "m.name AS member_name, m.phone AS member_phone, "
            "p.payment_mode, p.amount, s.name AS collected_by"
        ),
        columns=(
            Column("paid_on", "Date", "date"),
            Column("receipt_number", "Receipt No"),
            Column("invoice_number", "Invoice No"),
            Column("member_name", "Member Name"),
            Column("member_phone", "Mobile"),
            Column("payment_mode", "Pay Mode"),
            Column("amount", "Amount", "amount"),
            Column("collected_by", "Collected By"),
        ),
        filters=(
            *_date_range("date(p.paid_at)"),
            _branch("p.branch_id"),
            _staff("p.collected_by"),
            FilterField("paymentMode", "p.payment_mode", kind="enum",
                        label="Pay Mode", choices=_PAYMENT_MODES),
        ),
        base_conditions=("p.status = 'completed'",),
        order_by="p.paid_at DESC, p.id",
        summary=("COALESCE(SUM(p.amount), 0) AS total_collected, "
                 "COUNT(*) AS payment_count"),
    ),
    ReportDefinition(
        report_id="pending-collections",
        section="finance",
        slug="pending-collections",
        source=(
            "invoices i "
            "LEFT JOIN members m ON m.id = i.member_id "
            "LEFT JOIN staff s ON s.id = i.created_by"
        ),
        select=(
            "i.invoice_number, date(i.invoice_date) AS invoice_date, "
            "date(i.due_date) AS due_date, m.name AS member_name, "
            "m.phone AS member_phone, i.total, i.paid_amount, "
            "i.total - i.paid_amount AS pending_amount, i.status, "
            "s.name AS sales_rep"
        ),
        columns=(
            Column("invoice_number", "Invoice No"),
            Column("invoice_date", "Invoice Date", "date"),
            Column("due_date", "Due Date", "date"),
            Column("member_name", "Member Name"),
            Column("member_phone", "Mobile"),
            Column("total", "Invoice Amount", "amount"),
            Column("paid_amount", "Paid", "amount"),
            Column("pending_amount", "Pending", "amount"),
            Column("status", "Status"),
            Column("sales_rep", "Sales Rep"),
        ),
        filters=(
            *_date_range("date(i.due_date)"),
            _branch("i.branch_id"),
            _staff("i.created_by", "Sales Rep"),
            FilterField("status", "i.status", kind="enum", label="Status",
                        choices=("sent", "overdue", "partial")),
        ),
        base_conditions=("i.status IN ('sent', 'overdue', 'partial')",),
        order_by="i.due_date ASC, i.id",
        summary=("COALESCE(SUM(i.total - i.paid_amount), 0) AS total_pending, "
                 "COUNT(*) AS invoice_count"),
    ),
    ReportDefinition(
        report_id="refund-report",
        section="finance",
        slug="refund-report",
        source=(
            "payments p "
            "LEFT JOIN members m ON m.id = p.member_id "
            "LEFT JOIN invoices i ON i.id = p.invoice_id"
        ),
        select=(
            "date(p.refunded_at) AS refunded_on, p.receipt_number, "
            "i.invoice_number, m.name AS member_name, p.payment_mode, "
            "p.amount, p.refund_amount, p.status"
        ),
        columns=(
            Column("refunded_on", "Refund Date", "date"),
            Column("receipt_number", "Receipt No"),
            Column("invoice_number", "Invoice No"),
            Column("member_name", "Member Name"),
            Column("payment_mode", "Pay Mode"),
            Column("amount", "Paid Amount", "amount"),
            Column("refund_amount", "Refund Amount", "amount"),
            Column("status", "Status"),
        ),
        filters=(
            *_date_range("date(p.refunded_at)"),
            _branch("p.branch_id"),
        ),
        base_conditions=("p.status IN ('refunded', 'partial_refund')",),
        order_by="p.refunded_at DESC, p.id",
        summary=("COALESCE(SUM(p.refund_amount), 0) AS total_refunded, "
                 "COUNT(*) AS refund_count"),
    ),
    ReportDefinition(
        report_id="discount",
        section="finance",
        slug="discount",
        source=(
            "invoices i "
            "LEFT JOIN members m ON m.id = i.member_id "
            "LEFT JOIN plans pl ON pl.id = i.plan_id "
            "LEFT JOIN staff s ON s.id = i.created_by"
        ),
        select=(
            "date(i.invoice_date) AS invoice_date, i.invoice_number, "
            "m.name AS member_name, pl.name AS service_name, i.subtotal, "
            "i.discount_amount, i.discount_reason, i.total, "
            "s.name AS created_by"
        ),
        columns=(
            Column("invoice_date", "Date", "date"),
            Column("invoice_number", "Invoice No"),
            Column("member_name", "Member Name"),
            Column("service_name", "Service"),
            Column("subtotal", "Base Amount", "amount"),
            Column("discount_amount", "Discount", "amount"),
            Column("discount_reason", "Reason"),
            Column("total", "Final Amount", "amount"),
            Column("created_by", "Approved By"),
        ),
        filters=(
            *_date_range("date(i.invoice_date)"),
            _branch("i.branch_id"),
            _staff("i.created_by"),
        ),
        base_conditions=("i.discount_amount > 0", "i.status != 'cancelled'"),
        order_by="i.invoice_date DESC, i.id",
        summary=("COALESCE(SUM(i.discount_amount), 0) AS total_discount, "
                 "COUNT(*) AS invoice_count"),
    ),
    ReportDefinition(
        report_id="cancelled-invoices",
        section="finance",
        slug="cancelled-invoices",
        source=(
            "invoices i "
            "LEFT JOIN members m ON m.id = i.member_id "
            "LEFT JOIN staff s ON s.id = i.created_by"
        ),
        select=(
            "date(i.cancelled_at) AS cancelled_on, i.invoice_number, "
            "m.name AS member_name, i.total, i.cancel_reason, "
            "s.name AS created_by"
        ),
        columns=(
            Column("cancelled_on", "Cancelled On", "date"),
            Column("invoice_number", "Invoice No"),
            Column("member_name", "Member Name"),
            Column("total", "Amount", "amount"),
            Column("cancel_reason", "Reason"),
            Column("created_by", "Created By"),
        ),
        filters=(
            *_date_range("date(i.cancelled_at)"),
            _branch("i.branch_id"),
        ),
        base_conditions=("i.status = 'cancelled'",),
        order_by="i.cancelled_at DESC, i.id",
    ),
    ReportDefinition(
        report_id="payment-mode",
        section="finance",
        slug="payment-mode",
        source="payments p",
        select=(
            "p.payment_mode, COUNT(*) AS payment_count, "
            "COALESCE(SUM(p.amount), 0) AS total_amount"
        ),
        columns=(
            Column("payment_mode", "Pay Mode"),
            Column("payment_count", "Transactions", "count"),
            Column("total_amount", "Amount", "amount"),
        ),
        filters=(
            *_date_range("date(p.paid_at)"),
            _branch("p.branch_id"),
        ),
        base_conditions=("p.status = 'completed'",),
        group_by="p.payment_mode",
        order_by="total_amount DESC, p.payment_mode",
        summary=("COALESCE(SUM(p.amount), 0) AS total_amount, "
                 "COUNT(*) AS payment_count"),
    ),
    ReportDefinition(
        report_id="cashflow-statement",
        section="finance",
        slug="cashflow-statement",
        source=(
            "(SELECT date(paid_at) AS day, amount AS collected, "
            "0 AS expenses, branch_id FROM payments WHERE status = 'completed' "
            "UNION ALL "
            "SELECT date(voucher_date) AS day, 0 AS collected, "
            "amount AS expenses, branch_id FROM expenses WHERE status = 'paid') cf"
        ),
        select=(
            "cf.day AS date, SUM(cf.collected) AS collected, "
            "SUM(cf.expenses) AS expenses, "
            "SUM(cf.collected) - SUM(cf.expenses) AS net_balance"
        ),
        columns=(
            Column("date", "Date", "date"),
            Column("collected", "Collected", "amount"),
            Column("expenses", "Expenses", "amount"),
            Column("net_balance", "Net Balance", "amount"),
        ),
        filters=(
            FilterField("dateRange", "cf.day", kind="date_preset",
                        label="Date Range", default="last-30-days"),
            _branch("cf.branch_id"),
        ),
        group_by="cf.day",
        order_by="cf.day ASC",
        summary=(
            "COALESCE(SUM(cf.collected), 0) AS total_collection, "
            "COALESCE(SUM(cf.expenses), 0) AS total_expenses, "
            "COALESCE(SUM(cf.collected) - SUM(cf.expenses), 0) AS net_balance"
        ),
        filename_filters=("dateRange",),
    ),
    # Sales
    ReportDefinition(
        report_id="service-sales",
        section="sales",
        slug="service-sales",
        source="invoices i LEFT JOIN plans pl ON pl.id = i.plan_id",
        select=(
            "pl.name AS service_name, pl.service_type, "
            "COUNT(*) AS invoice_count, "
            "COALESCE(SUM(i.total), 0) AS total_sales, "
            "COALESCE(SUM(i.paid_amount), 0) AS total_paid"
        ),
        columns=(
            Column("service_name", "Service"),
            Column("service_type", "Service Type"),
            Column("invoice_count", "Invoices", "count"),
            Column("total_sales", "Sales", "amount"),
            Column("total_paid", "Collected", "amount"),
        ),
        filters=(
            *_date_range("date(i.invoice_date)"),
            _branch("i.branch_id"),
            _staff("i.created_by", "Sales Rep"),
            FilterField("serviceType", "pl.service_type", label="Service Type"),
        ),
        base_conditions=("i.status != 'cancelled'",),
        group_by="i.plan_id",
        order_by="total_sales DESC, service_name",
        summary=("COALESCE(SUM(i.total), 0) AS total_sales, "
                 "COUNT(*) AS invoice_count"),
    ),
    ReportDefinition(
        report_id="lead-source",
        section="sales",
        slug="lead-source",
        source="enquiries e",
        select=(
            "COALESCE(e.lead_source, 'unknown') AS lead_source, "
            "COUNT(*) AS enquiry_count, "
            "SUM(CASE WHEN e.status = 'converted' THEN 1 ELSE 0 END) AS converted_count"
        ),
        columns=(
            Column("lead_source", "Lead Source"),
            Column("enquiry_count", "Enquiries", "count"),
            Column("converted_count", "Converted", "count"),
        ),
        filters=(
            *_date_range("date(e.enquiry_date)"),
            _branch("e.branch_id"),
            _staff("e.assigned_staff_id"),
        ),
        group_by="COALESCE(e.lead_source, 'unknown')",
        order_by="enquiry_count DESC, lead_source",
        summary=(
            "COUNT(*) AS enquiry_count, "
            "COALESCE(SUM(CASE WHEN e.status = 'converted' THEN 1 ELSE 0 END), 0) "
            "AS converted_count"
        ),
    ),
    # Client management
    ReportDefinition(
        report_id="birthday-report",
        section="client-management",
        slug="birthday",
        source="members m LEFT JOIN branches b ON b.id = m.branch_id",
        select=(
            "m.member_code, m.name AS member_name, m.phone AS member_phone, "
            "m.email, date(m.date_of_birth) AS date_of_birth, "
            "m.membership_status, b.name AS branch_name"
        ),
        columns=(
            Column("member_code", "Member ID"),
            Column("member_name", "Member Name"),
            Column("member_phone", "Mobile"),
            Column("email", "Email"),
            Column("date_of_birth", "Birthday", "date"),
            Column("membership_status", "Status"),
            Column("branch_name", "Branch"),
        ),
        filters=(
            FilterField("fromDate", "strftime('%m-%d', m.date_of_birth)",
                        kind="month_day", op="gte", label="From"),
            FilterField("toDate", "strftime('%m-%d', m.date_of_birth)",
                        kind="month_day", op="lte", label="To"),
            FilterField("birthdayMonth",
                        "CAST(strftime('%m', m.date_of_birth) AS INTEGER)",
                        kind="month", label="Birthday"),
            _branch("m.branch_id"),
        ),
        base_conditions=("m.date_of_birth IS NOT NULL",),
        order_by="strftime('%m-%d', m.date_of_birth), m.name",
        filename_filters=("birthdayMonth",),
    ),
    ReportDefinition(
        report_id="new-clients",
        section="client-management",
        slug="new-clients",
        source=(
            "members m "
            "LEFT JOIN plans pl ON pl.id = m.plan_id "
            "LEFT JOIN staff s ON s.id = m.assigned_staff_id"
        ),
        select=(
            "date(m.joined_at) AS joined_on, m.member_code, "
            "m.name AS member_name, m.phone AS member_phone, m.gender, "
            "pl.name AS service_name, s.name AS sales_rep"
        ),
        columns=(
            Column("joined_on", "Joined", "date"),
            Column("member_code", "Member ID"),
            Column("member_name", "Member Name"),
            Column("member_phone", "Mobile"),
            Column("gender", "Gender"),
            Column("service_name", "Service"),
            Column("sales_rep", "Sales Rep"),
        ),
        filters=(
            *_date_range("date(m.joined_at)"),
            _branch("m.branch_id"),
            _staff("m.assigned_staff_id", "Sales Rep"),
            FilterField("gender", "m.gender", kind="enum", label="Gender",
                        choices=("male", "female", "other")),
        ),
        order_by="m.joined_at DESC, m.id",
        summary="COUNT(*) AS new_clients",
    ),
    ReportDefinition(
        report_id="membership-expiry",
        section="client-management",
        slug="membership-expiry",
        source=(
            "members m "
            "LEFT JOIN plans pl ON pl.id = m.plan_id "
            "LEFT JOIN staff s ON s.id = m.assigned_staff_id"
        ),
        select=(
            "m.member_code, m.name AS member_name, m.phone AS member_phone, "
            "pl.name AS service_name, date(m.membership_start) AS start_date, "
            "date(m.membership_end) AS end_date, m.membership_status, "
            "s.name AS sales_rep"
        ),
        columns=(
            Column("member_code", "Member ID"),
            Column("member_name", "Member Name"),
            Column("member_phone", "Mobile"),
            Column("service_name", "Service"),
            Column("start_date", "Start Date", "date"),
            Column("end_date", "End Date", "date"),
            Column("membership_status", "Status"),
            Column("sales_rep", "Sales Rep"),
        ),
        filters=(
            *_date_range("date(m.membership_end)"),
            _branch("m.branch_id"),
            _staff("m.assigned_staff_id", "Sales Rep"),
            FilterField("membershipStatus", "m.membership_status", kind="enum",
                        label="Status",
                        choices=("active", "expired", "frozen", "cancelled")),
        ),
        base_conditions=("m.membership_end IS NOT NULL",),
        order_by="m.membership_end ASC, m.id",
        summary="COUNT(*) AS expiring_members",
    ),
    ReportDefinition(
        report_id="member-checkins",
        section="client-management",
        slug="member-checkins",
        source=(
            "attendance a "
            "JOIN members m ON m.id = a.member_id "
            "LEFT JOIN branches b ON b.id = a.branch_id"
        ),
        select=(
            "date(a.check_in_time) AS check_in_date, "
            "time(a.check_in_time) AS check_in_time, "
            "time(a.check_out_time) AS check_out_time, m.member_code, "
            "m.name AS member_name, m.phone AS member_phone, "
            "b.name AS branch_name"
        ),
        columns=(
            Column("check_in_date", "Date", "date"),
            Column("check_in_time", "Check-in"),
            Column("check_out_time", "Check-out"),
            Column("member_code", "Member ID"),
            Column("member_name", "Member Name"),
            Column("member_phone", "Mobile"),
            Column("branch_name", "Branch"),
        ),
        filters=(
            *_date_range("date(a.check_in_time)"),
            _branch("a.branch_id"),
            FilterField("search", "m.name", op="like", label="Search"),
        ),
        base_conditions=("a.status = 'success'",),
        order_by="a.check_in_time DESC, a.id",
        summary=("COUNT(*) AS total_checkins, "
                 "COUNT(DISTINCT a.member_id) AS unique_members"),
    ),
    # Staff
    ReportDefinition(
        report_id="staff-birthday",
        section="staff",
        slug="birthday",
        source="staff s LEFT JOIN branches b ON b.id = s.branch_id",
        select=(
            "s.name AS staff_name, s.role, s.phone, "
            "date(s.date_of_birth) AS date_of_birth, b.name AS branch_name"
        ),
        columns=(
            Column("staff_name", "Staff Name"),
            Column("role", "Role"),
            Column("phone", "Mobile"),
            Column("date_of_birth", "Birthday", "date"),
            Column("branch_name", "Branch"),
        ),
        filters=(
            FilterField("birthdayMonth",
                        "CAST(strftime('%m', s.date_of_birth) AS INTEGER)",
                        kind="month", label="Birthday"),
            _branch("s.branch_id"),
        ),
        base_conditions=("s.date_of_birth IS NOT NULL", "s.is_active = 1"),
        order_by="strftime('%m-%d', s.date_of_birth), s.name",
        filename_filters=("birthdayMonth",),
    ),
    # Expense
    ReportDefinition(
        report_id="expense-summary",
        section="expense",
        slug="summary",
        source=(
            "expenses x "
            "LEFT JOIN branches b ON b.id = x.branch_id "
            "LEFT JOIN staff s ON s.id = x.created_by"
        ),
        select=(
            "date(x.voucher_date) AS voucher_date, x.voucher_number, "
            "x.category, x.description, x.amount, b.name AS branch_name, "
            "s.name AS created_by"
        ),
        columns=(
            Column("voucher_date", "Date", "date"),
            Column("voucher_number", "Voucher No"),
            Column("category", "Category"),
            Column("description", "Description"),
            Column("amount", "Amount", "amount"),
            Column("branch_name", "Branch"),
            Column("created_by", "Created By"),
        ),
        filters=(
            *_date_range("date(x.voucher_date)"),
            _branch("x.branch_id"),
            FilterField("category", "x.category", label="Category"),
        ),
        base_conditions=("x.status = 'paid'",),
        order_by="x.voucher_date DESC, x.id",
        summary=("COALESCE(SUM(x.amount), 0) AS total_expenses, "
                 "COUNT(*) AS voucher_count"),
    ),
)

REPORTS: dict[str, ReportDefinition] = {r.report_id: r for r in _REPORT_LIST}


def get_report(report_id: str) -> ReportDefinition | None:
    """Look up a report by id (None when unknown)."""
    return REPORTS.get(report_id)


def list_reports() -> list[ReportDefinition]:
    """All reports in catalogue order."""
    return list(_REPORT_LIST)
