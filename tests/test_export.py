"""
Tests for reports/export.py: download filenames and CSV streaming.
"""
import csv
import io
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from reports.definitions import Column, get_report  # noqa: E402
from reports.export import csv_stream, export_filename, filename_qualifiers  # noqa: E402


class TestExportFilename:
    def test_slug_and_date(self):
        assert export_filename("birthday-report", date(2025, 6, 15)) == \
            "birthday-report-2025-06-15.csv"

    def test_qualifier_variant(self):
        assert export_filename("cashflow-statement", date(2025, 6, 15), ["last-7-days"]) == \
            "cashflow-statement-last-7-days-2025-06-15.csv"

    def test_qualifiers_are_slugified(self):
        assert export_filename("x", date(2025, 1, 2), ["Last 7 Days", "", "/"]) == \
            "x-last-7-days-2025-01-02.csv"

    def test_defaults_to_today(self):
        name = export_filename("collection")
        assert name == f"collection-{date.today().isoformat()}.csv"


class TestFilenameQualifiers:
    def test_default_preset_counts(self):
        assert filename_qualifiers(get_report("cashflow-statement"), {}) == ["last-30-days"]

    def test_explicit_value(self):
        assert filename_qualifiers(get_report("cashflow-statement"),
                                   {"dateRange": "last-7-days"}) == ["last-7-days"]

    def test_sentinel_month_gives_plain_name(self):
        assert filename_qualifiers(get_report("birthday-report"),
                                   {"birthdayMonth": "all"}) == []

    def test_reports_without_keyed_filters(self):
        assert filename_qualifiers(get_report("collection"), {"branchId": "b1"}) == []


class TestCsvStream:
    COLUMNS = (Column("name", "Member Name"), Column("amount", "Amount", "amount"),
               Column("note", "Note"))

    def _parse(self, chunks) -> list[list[str]]:
        return list(csv.reader(io.StringIO("".join(chunks))))

    def test_header_then_rows(self):
        rows = [{"name": "Member 01", "amount": 1500, "note": None},
                {"name": "Smith, Jo", "amount": 2.5, "note": "paid \"late\""}]
        parsed = self._parse(csv_stream(self.COLUMNS, rows))
        assert parsed == [
            ["Member Name", "Amount", "Note"],
            ["Member 01", "1500.00", ""],
            ["Smith, Jo", "2.50", "paid \"late\""],
        ]

    def test_header_only_when_empty(self):
        assert self._parse(csv_stream(self.COLUMNS, [])) == [["Member Name", "Amount", "Note"]]

    def test_streams_one_chunk_per_row(self):
        chunks = list(csv_stream(self.COLUMNS, [{"name": "a", "amount": 1, "note": ""}] * 3))
        assert len(chunks) == 4
