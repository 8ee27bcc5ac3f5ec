"""
Tests for dashboard/page.py: the report page state machine, pagination
navigation, superseded loads, rendering and scoped export.
"""
import sys
import threading
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dashboard.client import ReportExportError, ReportFetchError  # noqa: E402
from dashboard.page import EXPORT_FAILED, EXPORT_OK, NO_RESULTS, PageState, ReportPage  # noqa: E402

TODAY = date(2025, 6, 15)


def _data(page=1, pages=3, total=47, records=None):
    if records is None:
        records = [{"member_name": f"Member {i}", "amount": 100.0} for i in range(2)]
    return {"records": records,
            "pagination": {"page": page, "pages": pages, "total": total},
            "summary": None}


def _echo_client(pages=3, total=47):
    """Client whose response echoes the requested page (server-side clamp)."""
    client = MagicMock()

    def fetch(report_id, filters, page=1, page_size=20):
        return _data(page=max(1, min(page, pages)), pages=pages, total=total)

    client.fetch_report.side_effect = fetch
    return client


def _page(client=None, **kwargs):
    kwargs.setdefault("filters", {"branchId": "all", "birthdayMonth": "all"})
    return ReportPage(client or _echo_client(), "birthday-report", **kwargs)


# ── State machine ─────────────────────────────────────────────────────────────

class TestStates:
    def test_starts_idle_without_fetching(self):
        client = _echo_client()
        page = _page(client)
        assert page.state is PageState.IDLE
        client.fetch_report.assert_not_called()

    def test_filter_edit_does_not_fetch(self):
        client = _echo_client()
        page = _page(client)
        page.set_filter("birthdayMonth", 6)
        assert page.state is PageState.IDLE
        client.fetch_report.assert_not_called()

    def test_search_loads(self):
        page = _page()
        assert page.search() is PageState.LOADED
        assert page.pagination == {"page": 1, "pages": 3, "total": 47}

    def test_empty_result(self):
        client = MagicMock()
        client.fetch_report.return_value = _data(pages=1, total=0, records=[])
        page = _page(client)
        assert page.search() is PageState.EMPTY
        assert NO_RESULTS in page.render()

    def test_error_state_and_no_retry(self):
        client = MagicMock()
        client.fetch_report.side_effect = ReportFetchError("Report server returned 500",
                                                           status_code=500)
        page = _page(client)
        assert page.search() is PageState.ERRORED
        assert "500" in page.error
        assert client.fetch_report.call_count == 1
        assert "Failed to load report" in page.render()

    def test_search_after_error_recovers(self):
        client = MagicMock()
        client.fetch_report.side_effect = [ReportFetchError("down"), _data()]
        page = _page(client)
        page.search()
        assert page.search() is PageState.LOADED
        assert page.error is None

    def test_loading_state_visible_during_fetch(self):
        seen = []
        client = MagicMock()

        def fetch(*args, **kwargs):
            seen.append(page.state)
            return _data()

        client.fetch_report.side_effect = fetch
        page = _page(client)
        page.search()
        assert seen == [PageState.LOADING]


# ── Filters and page reset ────────────────────────────────────────────────────

class TestFilters:
    def test_filter_change_resets_page(self):
        page = _page()
        page.search()
        page.next()
        assert page.page == 2
        page.set_filter("birthdayMonth", 6)
        assert page.page == 1

    def test_same_value_keeps_page(self):
        page = _page()
        page.search()
        page.next()
        page.set_filter("branchId", "all")
        assert page.page == 2

    def test_sentinels_passed_to_client(self):
        client = _echo_client()
        page = _page(client)
        page.search()
        args, kwargs = client.fetch_report.call_args
        assert args[1] == {"branchId": "all", "birthdayMonth": "all"}
        assert page.request_filters() == {}

    def test_reset_filters(self):
        page = _page()
        page.set_filter("birthdayMonth", 6)
        page.reset_filters()
        assert page.filters == {"branchId": "all", "birthdayMonth": "all"}

    def test_search_fetches_page_one(self):
        client = _echo_client()
        page = _page(client)
        page.search()
        page.last()
        page.search()
        assert client.fetch_report.call_args.kwargs["page"] == 1


# ── Pagination navigation ─────────────────────────────────────────────────────

class TestNavigation:
    def test_not_before_search(self):
        client = _echo_client()
        page = _page(client)
        assert page.next() is False
        client.fetch_report.assert_not_called()

    def test_next_prev_first_last(self):
        page = _page()
        page.search()
        assert page.next() and page.page == 2
        assert page.last() and page.page == 3
        assert page.prev() and page.page == 2
        assert page.first() and page.page == 1

    def test_disabled_at_boundaries(self):
        client = _echo_client()
        page = _page(client)
        page.search()
        assert page.first() is False
        assert page.prev() is False
        page.last()
        calls = client.fetch_report.call_count
        assert page.next() is False
        assert page.last() is False
        assert client.fetch_report.call_count == calls

    def test_go_to_clamps(self):
        page = _page()
        page.search()
        page.go_to(99)
        assert page.page == 3

    def test_server_clamp_is_adopted(self):
        client = MagicMock()
        client.fetch_report.return_value = _data(page=1, pages=1, total=3)
        page = _page(client)
        page.page = 5
        page.searched = True
        page.load()
        assert page.page == 1


# ── Superseded loads ──────────────────────────────────────────────────────────

class TestSuperseded:
    def test_stale_completion_discarded(self):
        page = _page()
        first = page.begin_load()
        second = page.begin_load()
        assert page.complete_load(second, _data(total=5, pages=1)) is True
        assert page.complete_load(first, _data(total=99, pages=5)) is False
        assert page.pagination["total"] == 5
        assert page.state is PageState.LOADED

    def test_stale_failure_discarded(self):
        page = _page()
        first = page.begin_load()
        second = page.begin_load()
        page.complete_load(second, _data())
        assert page.fail_load(first, RuntimeError("late")) is False
        assert page.state is PageState.LOADED

    def test_slow_response_does_not_overwrite_newer(self):
        release = threading.Event()
        started = threading.Event()
        client = MagicMock()

        def fetch(report_id, filters, page=1, page_size=20):
            if filters.get("birthdayMonth") == 1:
                started.set()
                release.wait(5)
                return _data(total=1, pages=1, records=[{"member_name": "old"}])
            return _data(total=2, pages=1, records=[{"member_name": "new"}])

        client.fetch_report.side_effect = fetch
        page = _page(client)
        page.set_filter("birthdayMonth", 1)
        slow = threading.Thread(target=page.search)
        slow.start()
        assert started.wait(5)
        page.set_filter("birthdayMonth", 6)
        page.search()
        release.set()
        slow.join(5)
        assert page.records == [{"member_name": "new"}]
        assert page.pagination["total"] == 2

    def test_is_current(self):
        page = _page()
        token = page.begin_load()
        assert page.is_current(token)
        page.begin_load()
        assert not page.is_current(token)


# ── Rendering ─────────────────────────────────────────────────────────────────

class TestRender:
    def test_idle(self):
        assert "press Go" in _page().render()

    def test_loaded_table_and_captions(self):
        page = _page(columns=[("member_name", "Member Name"), ("amount", "Amount")],
                     title="Birthday Report")
        page.search()
        text = page.render()
        assert text.splitlines()[0] == "Birthday Report"
        assert "Member Name" in text
        assert "100.00" in text
        assert "Showing 1 to 20 of 47 results" in text
        assert "Page 1 Of 3" in text

    def test_columns_derived_from_records(self):
        page = _page()
        page.search()
        assert "Member Name" in page.render()

    def test_empty_captions(self):
        client = MagicMock()
        client.fetch_report.return_value = _data(pages=1, total=0, records=[])
        page = _page(client)
        page.search()
        text = page.render()
        assert NO_RESULTS in text
        assert "Showing 0 to 0 of 0 results" in text
        assert "Page 1 Of 1" in text


# ── Export ────────────────────────────────────────────────────────────────────

class TestExport:
    def test_writes_file_and_notifies(self, tmp_path):
        client = MagicMock()
        client.download_export.return_value = (b"Member ID\r\nGYM001\r\n", None)
        notices = []
        page = _page(client, notify=notices.append)
        path = page.export(tmp_path, today=TODAY)
        assert path == tmp_path / "birthday-report-2025-06-15.csv"
        assert path.read_bytes() == b"Member ID\r\nGYM001\r\n"
        assert notices == [EXPORT_OK]
        assert sorted(p.name for p in tmp_path.iterdir()) == ["birthday-report-2025-06-15.csv"]

    def test_server_filename_preferred(self, tmp_path):
        # The server applied its last-30-days default; the page sent nothing
        client = MagicMock()
        client.download_export.return_value = (
            b"Date\r\n", "cashflow-statement-last-30-days-2025-06-15.csv")
        page = ReportPage(client, "cashflow-statement", filename_keys=("dateRange",))
        path = page.export(tmp_path, today=TODAY)
        assert path.name == "cashflow-statement-last-30-days-2025-06-15.csv"
        assert page.export_filename(TODAY) == "cashflow-statement-2025-06-15.csv"

    def test_export_sends_current_filters(self, tmp_path):
        client = MagicMock()
        client.download_export.return_value = (b"", None)
        page = _page(client)
        page.set_filter("birthdayMonth", 6)
        page.export(tmp_path, today=TODAY)
        client.download_export.assert_called_once_with(
            "birthday-report", {"branchId": "all", "birthdayMonth": 6})

    def test_failure_leaves_no_file(self, tmp_path):
        client = MagicMock()
        client.download_export.side_effect = ReportExportError("Report server returned 500")
        page = _page(client)
        assert page.export(tmp_path, today=TODAY) is None
        assert page.notices == [EXPORT_FAILED]
        assert list(tmp_path.iterdir()) == []

    def test_write_failure_leaves_no_file(self, tmp_path, monkeypatch):
        client = MagicMock()
        client.download_export.return_value = (b"data", None)

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("dashboard.download.os.replace", broken_replace)
        page = _page(client)
        assert page.export(tmp_path, today=TODAY) is None
        assert page.notices == [EXPORT_FAILED]
        assert list(tmp_path.iterdir()) == []

    def test_keyed_filename(self, tmp_path):
        page = ReportPage(MagicMock(), "cashflow-statement",
                          filters={"dateRange": "last-7-days"},
                          filename_keys=("dateRange",))
        assert page.export_filename(TODAY) == "cashflow-statement-last-7-days-2025-06-15.csv"

    @pytest.mark.parametrize("value", ["all", ""])
    def test_sentinel_keyed_filter_not_in_name(self, value):
        page = ReportPage(MagicMock(), "birthday-report",
                          filters={"birthdayMonth": value},
                          filename_keys=("birthdayMonth",))
        assert page.export_filename(TODAY) == "birthday-report-2025-06-15.csv"
