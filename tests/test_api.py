"""
API endpoint tests.

Uses FastAPI TestClient (backed by httpx) with the seeded gym database
fixture.  Each test group covers one endpoint: happy path, empty results,
invalid parameters, and pagination.
"""
import csv
import io
from datetime import date
from unittest.mock import patch

import pytest

# FastAPI TestClient requires fastapi + httpx; skip the entire module if not installed
pytest.importorskip("fastapi")
pytest.importorskip("httpx")

from fastapi.testclient import TestClient  # noqa: E402

TODAY = date(2025, 6, 15)


@pytest.fixture(scope="module")
def client(gym_db_path):
    """Create a FastAPI TestClient wired to the seeded gym database."""
    from api.app import create_app
    app = create_app(db_path=gym_db_path)
    with TestClient(app, raise_server_exceptions=False) as c:
        with patch("api.routes.reports._today", return_value=TODAY):
            yield c


# ── /health ───────────────────────────────────────────────────────────────────

class TestHealth:
    def test_health_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["members"] == 25

    def test_health_missing_db(self, client, tmp_path, monkeypatch):
        monkeypatch.setattr("api.database._DB_PATH", tmp_path / "missing.sqlite")
        resp = client.get("/health")
        assert resp.status_code == 503
        assert resp.json()["status"] == "no_database"


# ── /api/v1/reports ───────────────────────────────────────────────────────────

class TestCatalogue:
    def test_lists_reports(self, client):
        resp = client.get("/api/v1/reports")
        assert resp.status_code == 200
        body = resp.json()
        ids = [r["report_id"] for r in body]
        assert "birthday-report" in ids
        assert len(ids) == 15
        birthday = next(r for r in body if r["report_id"] == "birthday-report")
        assert birthday["path"] == "/reports/client-management/birthday"
        assert {f["key"] for f in birthday["filters"]} >= {"fromDate", "toDate", "birthdayMonth"}


class TestFetchReport:
    def test_envelope(self, client):
        resp = client.get("/api/v1/reports/collection")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["pagination"] == {"page": 1, "pages": 1, "total": 4}
        assert body["data"]["summary"]["total_collected"] == 6500.0

    def test_pagination_and_clamp(self, client):
        resp = client.get("/api/v1/reports/birthday-report", params={"page": 50})
        data = resp.json()["data"]
        assert data["pagination"] == {"page": 2, "pages": 2, "total": 25}
        assert len(data["records"]) == 5

    def test_negative_page_clamped(self, client):
        resp = client.get("/api/v1/reports/birthday-report", params={"page": -3})
        assert resp.json()["data"]["pagination"]["page"] == 1

    def test_limit(self, client):
        resp = client.get("/api/v1/reports/new-clients", params={"limit": 10})
        assert resp.json()["data"]["pagination"]["pages"] == 3

    def test_configured_default_page_size(self, client, monkeypatch):
        import api.routes.reports as reports_routes
        monkeypatch.setattr(reports_routes._cfg, "default_page_size", 5)
        data = client.get("/api/v1/reports/birthday-report").json()["data"]
        assert data["pagination"] == {"page": 1, "pages": 5, "total": 25}
        assert len(data["records"]) == 5
        # An explicit limit still wins
        resp = client.get("/api/v1/reports/birthday-report", params={"limit": 25})
        assert resp.json()["data"]["pagination"]["pages"] == 1
        catalogue = client.get("/api/v1/reports").json()
        assert {r["page_size"] for r in catalogue} == {5}

    def test_limit_out_of_range(self, client):
        resp = client.get("/api/v1/reports/new-clients", params={"limit": 501})
        assert resp.status_code == 422

    def test_filters_from_query(self, client):
        resp = client.get("/api/v1/reports/birthday-report",
                          params={"birthdayMonth": "6", "branchId": "all"})
        names = [r["member_name"] for r in resp.json()["data"]["records"]]
        assert names == ["Member 06", "Member 18"]

    def test_unknown_filter_ignored(self, client):
        resp = client.get("/api/v1/reports/collection", params={"colour": "blue"})
        assert resp.json()["data"]["pagination"]["total"] == 4

    def test_malformed_filter_is_400(self, client):
        resp = client.get("/api/v1/reports/collection", params={"fromDate": "June 1"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "Bad request"
        assert body["status_code"] == 400
        assert "fromDate" in body["detail"]

    def test_unknown_report_404(self, client):
        resp = client.get("/api/v1/reports/nope")
        assert resp.status_code == 404

    def test_date_preset_uses_today(self, client):
        resp = client.get("/api/v1/reports/cashflow-statement",
                          params={"dateRange": "last-7-days"})
        assert resp.json()["data"]["pagination"]["total"] == 1

    def test_empty_result(self, client):
        resp = client.get("/api/v1/reports/collection", params={"fromDate": "2030-01-01"})
        data = resp.json()["data"]
        assert data["records"] == []
        assert data["pagination"] == {"page": 1, "pages": 1, "total": 0}

    def test_missing_db_is_503(self, client, tmp_path, monkeypatch):
        monkeypatch.setattr("api.database._DB_PATH", tmp_path / "missing.sqlite")
        assert client.get("/api/v1/reports/collection").status_code == 503

    def test_request_id_header(self, client):
        resp = client.get("/api/v1/reports/collection")
        assert len(resp.headers["X-Request-ID"]) == 8


class TestExport:
    def test_csv_body_and_headers(self, client):
        resp = client.get("/api/v1/reports/birthday-report/export")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.headers["X-Total-Count"] == "25"
        assert resp.headers["Content-Disposition"] == \
            "attachment; filename=birthday-report-2025-06-15.csv"
        rows = list(csv.reader(io.StringIO(resp.text)))
        assert rows[0][:2] == ["Member ID", "Member Name"]
        assert len(rows) == 26

    def test_export_respects_filters(self, client):
        resp = client.get("/api/v1/reports/collection/export",
                          params={"branchId": "b1", "page": 2})
        rows = list(csv.reader(io.StringIO(resp.text)))
        assert len(rows) == 4

    def test_preset_qualifies_filename(self, client):
        resp = client.get("/api/v1/reports/cashflow-statement/export",
                          params={"dateRange": "last-7-days"})
        assert resp.headers["Content-Disposition"].endswith(
            "filename=cashflow-statement-last-7-days-2025-06-15.csv")

    def test_malformed_filter_is_400(self, client):
        resp = client.get("/api/v1/reports/collection/export",
                          params={"paymentMode": "gold"})
        assert resp.status_code == 400

    def test_unknown_report_404(self, client):
        assert client.get("/api/v1/reports/nope/export").status_code == 404


# ── Breadcrumbs ───────────────────────────────────────────────────────────────

class TestBreadcrumbs:
    def test_json_trail(self, client):
        resp = client.get("/api/v1/breadcrumbs", params={"path": "/staff/7/targets"})
        assert resp.status_code == 200
        assert resp.json() == [
            {"label": "Home", "to": "/"},
            {"label": "Staff", "to": "/staff"},
            {"label": "Staff Details", "to": "/staff/7"},
            {"label": "Targets", "to": None},
        ]

    def test_root(self, client):
        resp = client.get("/api/v1/breadcrumbs", params={"path": "/"})
        assert resp.json() == [{"label": "Home", "to": None}]

    def test_html_partial(self, client):
        resp = client.get("/partials/breadcrumbs", params={"path": "/reports/finance"})
        assert resp.status_code == 200
        html = resp.text
        assert '<a class="breadcrumb-link" href="/">Home</a>' in html
        assert '<a class="breadcrumb-link" href="/reports">Reports</a>' in html
        assert "<strong>Finance</strong>" in html
        assert html.count('class="breadcrumb-sep"') == 2
