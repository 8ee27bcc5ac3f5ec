"""
Pytest fixtures for the gym report tests.

Provides a temporary SQLite database built with schema_design.create_db()
and seeded with a small, fully deterministic data set, plus a FastAPI
TestClient wired to it.

Seeded data at a glance (amounts in rupees):
    branches    b1 Downtown, b2 Uptown
    members     25 (m01..m25); odd ids in b1, even in b2; odd male, even
                female; born 1990-MM-10 with MM = (i-1) % 12 + 1; joined
                2025-06-i; membership ends 2025-07-i
    invoices    6: paid, sent (discounted), partial, overdue, cancelled,
                paid (discounted)
    payments    4 completed (cash 1500, upi 1000, card 3500, cash 500)
                and 1 refunded (card 2000)
    expenses    2 paid (5000 + 800) and 1 pending
    attendance  3 successful check-ins by 2 members, 1 failed
    enquiries   walk-in x2 (one converted), instagram, unknown source
"""

import sqlite3
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from schema_design import create_db  # noqa: E402

MEMBER_COUNT = 25


def _members() -> list[tuple]:
    rows = []
    for i in range(1, MEMBER_COUNT + 1):
        rows.append((
            f"m{i:02d}",
            f"GYM{i:03d}",
            f"Member {i:02d}",
            f"90000000{i:02d}",
            f"member{i:02d}@example.com",
            "male" if i % 2 else "female",
            f"1990-{(i - 1) % 12 + 1:02d}-10",
            "b1" if i % 2 else "b2",
            "p1",
            "s1",
            "active",
            f"2025-06-{i:02d}",
            f"2025-06-{i:02d}",
            f"2025-07-{i:02d}",
        ))
    return rows


_BRANCHES = [("b1", "Downtown", "Pune"), ("b2", "Uptown", "Pune")]

_STAFF = [
    ("s1", "Asha Rao", "b1", "trainer", "9800000001", "1990-06-20", 1),
    ("s2", "Ravi Shah", "b2", "manager", "9800000002", "1985-12-05", 1),
    ("s3", "Former Coach", "b1", "trainer", "9800000003", "1980-06-01", 0),
]

_PLANS = [
    ("p1", "Monthly Gym", "gym", 30, 1500.0),
    ("p2", "Annual Gym", "gym", 365, 12000.0),
    ("p3", "Yoga Pack", "yoga", 90, 4000.0),
]

# id, number, member, branch, plan, created_by, status, invoice_date, due_date,
# subtotal, discount, discount_reason, tax, total, paid, cancelled_at, cancel_reason
_INVOICES = [
    ("i1", "INV-001", "m01", "b1", "p1", "s1", "paid", "2025-06-01", "2025-06-01",
     1500, 0, None, 0, 1500, 1500, None, None),
    ("i2", "INV-002", "m02", "b2", "p2", "s2", "sent", "2025-06-02", "2025-06-20",
     12000, 1000, "festival", 0, 11000, 0, None, None),
    ("i3", "INV-003", "m03", "b1", "p3", "s1", "partial", "2025-06-03", "2025-06-18",
     4000, 0, None, 0, 4000, 1000, None, None),
    ("i4", "INV-004", "m04", "b2", "p1", "s2", "overdue", "2025-05-04", "2025-05-20",
     1500, 0, None, 0, 1500, 0, None, None),
    ("i5", "INV-005", "m05", "b1", "p1", "s1", "cancelled", "2025-06-05", "2025-06-05",
     1500, 200, "promo", 0, 1300, 0, "2025-06-06T10:00:00", "duplicate"),
    ("i6", "INV-006", "m06", "b1", "p3", "s1", "paid", "2025-06-06", "2025-06-06",
     4000, 500, "referral", 0, 3500, 3500, None, None),
]

# id, receipt, invoice, member, branch, collected_by, mode, status, amount,
# refund_amount, paid_at, refunded_at
_PAYMENTS = [
    ("pay1", "RCPT-001", "i1", "m01", "b1", "s1", "cash", "completed", 1500, 0,
     "2025-06-01T10:00:00", None),
    ("pay2", "RCPT-002", "i3", "m03", "b1", "s1", "upi", "completed", 1000, 0,
     "2025-06-03T11:00:00", None),
    ("pay3", "RCPT-003", "i6", "m06", "b1", "s2", "card", "completed", 3500, 0,
     "2025-06-06T12:00:00", None),
    ("pay4", "RCPT-004", "i2", "m02", "b2", "s2", "card", "refunded", 2000, 2000,
     "2025-06-02T09:00:00", "2025-06-04T09:00:00"),
    ("pay5", "RCPT-005", None, "m07", "b2", "s2", "cash", "completed", 500, 0,
     "2025-06-10T08:00:00", None),
]

_EXPENSES = [
    ("e1", "V001", "b1", "rent", "June rent", 5000, "paid", "2025-06-01", "s2"),
    ("e2", "V002", "b2", "utilities", "Electricity", 800, "paid", "2025-06-03", "s2"),
    ("e3", "V003", "b1", "supplies", "Towels", 300, "pending", "2025-06-03", "s1"),
]

_ATTENDANCE = [
    ("a1", "m01", "b1", "2025-06-10T07:00:00", "2025-06-10T08:00:00", "success", "s1"),
    ("a2", "m01", "b1", "2025-06-11T07:05:00", None, "success", "s1"),
    ("a3", "m02", "b2", "2025-06-11T18:00:00", None, "success", "s2"),
    ("a4", "m03", "b1", "2025-06-12T06:30:00", None, "failed", "s1"),
]

_ENQUIRIES = [
    ("q1", "Walk In One", "9700000001", "b1", "s1", "walk-in", "converted", "2025-06-01", "m01"),
    ("q2", "Walk In Two", "9700000002", "b1", "s1", "walk-in", "open", "2025-06-02", None),
    ("q3", "Insta Lead", "9700000003", "b2", "s2", "instagram", "open", "2025-06-03", None),
    ("q4", "Unknown Lead", "9700000004", "b2", "s2", None, "open", "2025-06-04", None),
]


def seed_gym_db(conn: sqlite3.Connection) -> None:
    """Insert the deterministic fixture rows described in the module docstring."""
    conn.executemany("INSERT INTO branches VALUES (?, ?, ?)", _BRANCHES)
    conn.executemany("INSERT INTO staff VALUES (?, ?, ?, ?, ?, ?, ?)", _STAFF)
    conn.executemany("INSERT INTO plans VALUES (?, ?, ?, ?, ?)", _PLANS)
    conn.executemany(
        "INSERT INTO members VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        _members(),
    )
    conn.executemany(
        "INSERT INTO invoices VALUES "
        "(?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        _INVOICES,
    )
    conn.executemany(
        "INSERT INTO payments VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        _PAYMENTS,
    )
    conn.executemany("INSERT INTO expenses VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)", _EXPENSES)
    conn.executemany("INSERT INTO attendance VALUES (?, ?, ?, ?, ?, ?, ?)", _ATTENDANCE)
    conn.executemany("INSERT INTO enquiries VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)", _ENQUIRIES)
    conn.commit()


@pytest.fixture(scope="session")
def gym_db_path(tmp_path_factory) -> Path:
    """Path to a seeded gym database shared by the whole test session."""
    path = tmp_path_factory.mktemp("gym") / "gym_reports.sqlite"
    conn = create_db(path)
    seed_gym_db(conn)
    conn.close()
    return path


@pytest.fixture()
def gym_conn(gym_db_path):
    """Open a Row-factory connection to the seeded database."""
    conn = sqlite3.connect(str(gym_db_path))
    conn.row_factory = sqlite3.Row
    yield conn
    conn.close()


@pytest.fixture()
def empty_db_path(tmp_path) -> Path:
    """A migrated database with no rows."""
    path = tmp_path / "empty.sqlite"
    create_db(path).close()
    return path
