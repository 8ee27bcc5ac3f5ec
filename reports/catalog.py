"""Report sections and their display labels, keyed by URL slug.

The dashboard lays reports out under ``/reports/<section>/<slug>``; this
table is the source of the section and page titles used by the report
listing and the breadcrumb route table.
"""

REPORT_SECTIONS: dict[str, dict] = {
    "finance": {
        "label": "Finance",
        "reports": {
            "pending-collections": "Pending Collections",
            "refund-report": "Refund Report",
            "all-invoices": "All Invoices",
            "paid-invoices": "Paid Invoices",
            "receipts": "Receipts",
            "revenue-realization": "Revenue Realization",
            "revenue-realization-base-value": "Revenue Realization (Base Value)",
            "collection": "Collection Report",
            "cashflow-statement": "Cash Flow Statement",
            "payment-mode": "Payment Mode Report",
            "backdated-bills": "Backdated Bills - Service Sales",
            "discount": "Discount Report",
            "cancelled-invoices": "Cancelled Invoices",
            "effective-sales-accounting": "Effective Sales (Accounting)",
        },
    },
    "sales": {
        "label": "Sales",
        "reports": {
            "dsr": "DSR Report",
            "revenue": "Revenue Report",
            "revenue-month-till-date": "Revenue - Month Till Date",
            "service-sales": "Service Sales",
            "enquiry-conversion": "Enquiry Conversion Report",
            "lead-source": "Lead Source Report",
        },
    },
    "client-management": {
        "label": "Client Management",
        "reports": {
            "renewal-vs-attrition": "Renewal Vs Attrition Report",
            "upgrade": "Upgrade & Cross-Sell",
            "member-checkins": "Member Check-ins",
            "multiclub-member-checkins": "Multi Club Member Check-ins",
            "member-attendance-register": "Member Attendance Register",
            "new-clients": "New Clients Report",
            "renewals": "Renewals Report",
            "membership": "Membership Report",
            "membership-expiry": "Membership Expiry Report",
            "service-expiry": "Service Expiry",
            "irregular-members": "Irregular Members Report",
            "active-members": "Active Members Report",
            "inactive-members": "Inactive Members Report",
            "multiclub-clients": "Multi Club Clients Report",
            "archived-clients": "Archived Clients Report",
            "freeze-and-date-change": "Freeze and Date Change",
            "suspensions": "Suspensions Report",
            "attendance-heat-map": "Attendance Heat Map",
            "service-transfer": "Service Transfer Report",
            "birthday": "Birthday Report",
            "client-attendance": "Client Attendance Report",
            "membership-retention": "Membership Retention Report",
            "cancellation": "Cancellation Report",
            "profile-change": "Profile Change Report",
            "one-time-purchaser": "One-time Purchaser Report",
            "average-lifetime-value": "Average Lifetime Value Report",
        },
    },
    "staff": {
        "label": "Staff",
        "reports": {
            "check-ins": "Staff Check-ins",
            "leave": "Staff Leave Report",
            "attendance-register": "Staff Attendance Register",
            "birthday": "Staff Birthday Report",
            "call-log": "Call Log Report",
        },
    },
    "expense": {
        "label": "Expense",
        "reports": {
            "summary": "Expense Summary",
        },
    },
}


def section_label(section: str) -> str:
    """Display label of a section ("" when unknown)."""
    return REPORT_SECTIONS.get(section, {}).get("label", "")


def report_label(section: str, slug: str) -> str:
    """Display label of the report page at /reports/<section>/<slug>."""
    return REPORT_SECTIONS.get(section, {}).get("reports", {}).get(slug, "")
