"""
Gym reporting schema.

Defines the relational tables the report engine reads: branches, staff,
plans, members, invoices, payments, expenses, attendance and enquiries.
Identifiers are opaque TEXT keys; dates are ISO-8601 TEXT
("2025-06-15" or "2025-06-15T07:30:00") so sqlite's date() and strftime()
work on them directly.

Usage:
    python schema_design.py gym_reports.sqlite     # create / migrate a database
"""

import logging
import sqlite3
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

_DDL_SCHEMA_VERSION = """
CREATE TABLE IF NOT EXISTS schema_version (
    version     INTEGER PRIMARY KEY,
    description TEXT NOT NULL,
    applied_at  TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

_DDL_001_CORE = """
CREATE TABLE IF NOT EXISTS branches (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    city        TEXT
);

CREATE TABLE IF NOT EXISTS staff (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    branch_id       TEXT REFERENCES branches(id),
    role            TEXT,
    phone           TEXT,
    date_of_birth   TEXT,
    is_active       INTEGER NOT NULL DEFAULT 1
);

CREATE TABLE IF NOT EXISTS plans (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    service_type    TEXT,
    duration_days   INTEGER,
    price           REAL
);

CREATE TABLE IF NOT EXISTS members (
    id                  TEXT PRIMARY KEY,
    member_code         TEXT,
    name                TEXT NOT NULL,
    phone               TEXT,
    email               TEXT,
    gender              TEXT,
    date_of_birth       TEXT,
    branch_id           TEXT REFERENCES branches(id),
    plan_id             TEXT REFERENCES plans(id),
    assigned_staff_id   TEXT REFERENCES staff(id),
    membership_status   TEXT,
    joined_at           TEXT,
    membership_start    TEXT,
    membership_end      TEXT
);

CREATE TABLE IF NOT EXISTS invoices (
    id              TEXT PRIMARY KEY,
    invoice_number  TEXT,
    member_id       TEXT REFERENCES members(id),
    branch_id       TEXT REFERENCES branches(id),
    plan_id         TEXT REFERENCES plans(id),
    created_by      TEXT REFERENCES staff(id),
    status          TEXT,
    invoice_date    TEXT,
    due_date        TEXT,
    subtotal        REAL DEFAULT 0,
    discount_amount REAL DEFAULT 0,
    discount_reason TEXT,
    tax_amount      REAL DEFAULT 0,
    total           REAL DEFAULT 0,
    paid_amount     REAL DEFAULT 0,
    cancelled_at    TEXT,
    cancel_reason   TEXT
);

CREATE TABLE IF NOT EXISTS payments (
    id              TEXT PRIMARY KEY,
    receipt_number  TEXT,
    invoice_id      TEXT REFERENCES invoices(id),
    member_id       TEXT REFERENCES members(id),
    branch_id       TEXT REFERENCES branches(id),
    collected_by    TEXT REFERENCES staff(id),
    payment_mode    TEXT,
    status          TEXT,
    amount          REAL DEFAULT 0,
    refund_amount   REAL DEFAULT 0,
    paid_at         TEXT,
    refunded_at     TEXT
);

CREATE TABLE IF NOT EXISTS expenses (
    id              TEXT PRIMARY KEY,
    voucher_number  TEXT,
    branch_id       TEXT REFERENCES branches(id),
    category        TEXT,
    description     TEXT,
    amount          REAL DEFAULT 0,
    status          TEXT,
    voucher_date    TEXT,
    created_by      TEXT REFERENCES staff(id)
);

CREATE TABLE IF NOT EXISTS attendance (
    id              TEXT PRIMARY KEY,
    member_id       TEXT REFERENCES members(id),
    branch_id       TEXT REFERENCES branches(id),
    check_in_time   TEXT,
    check_out_time  TEXT,
    status          TEXT,
    checked_in_by   TEXT REFERENCES staff(id)
);

CREATE TABLE IF NOT EXISTS enquiries (
    id                  TEXT PRIMARY KEY,
    name                TEXT,
    phone               TEXT,
    branch_id           TEXT REFERENCES branches(id),
    assigned_staff_id   TEXT REFERENCES staff(id),
    lead_source         TEXT,
    status              TEXT,
    enquiry_date        TEXT,
    converted_member_id TEXT REFERENCES members(id)
);
"""

_DDL_002_INDEXES = """
CREATE INDEX IF NOT EXISTS idx_members_branch    ON members(branch_id);
CREATE INDEX IF NOT EXISTS idx_members_joined    ON members(joined_at);
CREATE INDEX IF NOT EXISTS idx_invoices_status   ON invoices(status, invoice_date);
CREATE INDEX IF NOT EXISTS idx_payments_status   ON payments(status, paid_at);
CREATE INDEX IF NOT EXISTS idx_expenses_date     ON expenses(voucher_date);
CREATE INDEX IF NOT EXISTS idx_attendance_checkin ON attendance(check_in_time);
CREATE INDEX IF NOT EXISTS idx_enquiries_date    ON enquiries(enquiry_date);
"""

_MIGRATIONS: list[tuple[int, str, str]] = [
    (1, "core gym tables", _DDL_001_CORE),
    (2, "report filter indexes", _DDL_002_INDEXES),
]

REPORT_TABLES = ("branches", "staff", "plans", "members", "invoices",
                 "payments", "expenses", "attendance", "enquiries")


def _current_version(conn: sqlite3.Connection) -> int:
    """Return the highest applied migration version (0 if none applied)."""
    try:
        row = conn.execute(
            "SELECT MAX(version) FROM schema_version"
        ).fetchone()
        return row[0] or 0
    except sqlite3.OperationalError:
        return 0


def migrate(conn: sqlite3.Connection) -> int:
    """Apply all pending migrations in order.

    Idempotent: already-applied migrations are skipped.  The schema_version
    table is created if absent.

    Returns:
        Number of migrations applied in this call (0 if already up to date).
    """
    conn.execute(_DDL_SCHEMA_VERSION)
    conn.commit()

    current = _current_version(conn)
    applied = 0

    for version, description, sql in _MIGRATIONS:
        if version <= current:
            continue
        conn.executescript(sql)
        conn.execute(
            "INSERT INTO schema_version (version, description) VALUES (?, ?)",
            (version, description),
        )
        conn.commit()
        logger.info("applied migration %d: %s", version, description)
        applied += 1

    return applied


def create_db(db_path: Path) -> sqlite3.Connection:
    """Open (or create) a report database and run all migrations.

    Returns:
        An open sqlite3.Connection with WAL mode and all migrations applied.
    """
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA synchronous=NORMAL")
    conn.execute("PRAGMA foreign_keys=ON")
    migrate(conn)
    return conn


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("gym_reports.sqlite")
    create_db(target).close()
    print(f"Schema ready at {target}")
