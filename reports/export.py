"""
CSV export of a report's full filtered row set.

The body is a header row of column labels followed by one row per record;
nothing else.  Rows are streamed so large exports never sit in memory.
"""

import csv
import io
from collections.abc import Iterable, Iterator, Mapping, Sequence
from datetime import date
from typing import Any

from reports.definitions import Column, ReportDefinition
from utils.strings import slugify


def export_filename(slug: str, on: date | None = None,
                    qualifiers: Sequence[str] = ()) -> str:
    """Download filename for a report export.

    Examples:
        export_filename("birthday-report", date(2025, 6, 15))
            -> "birthday-report-2025-06-15.csv"
        export_filename("cashflow-statement", date(2025, 6, 15), ["last-7-days"])
            -> "cashflow-statement-last-7-days-2025-06-15.csv"
    """
    on = on or date.today()
    parts = [slug, *(q for q in (slugify(q) for q in qualifiers) if q)]
    return f"{'-'.join(parts)}-{on.isoformat()}.csv"


def filename_qualifiers(definition: ReportDefinition,
                        filters: Mapping[str, Any] | None) -> list[str]:
    """Filename parts for the report's keyed filters that are in effect.

    Declared defaults count as in effect, so an unfiltered cash flow export
    is still named after its "last-30-days" window.
    """
    applied = definition.applied_filters(filters)
    return [str(applied[k]) for k in definition.filename_filters if k in applied]


def _cell(value: Any, column: Column) -> Any:
    if value is None:
        return ""
    if column.kind == "amount" and isinstance(value, (int, float)):
        return f"{float(value):.2f}"
    return value


def csv_stream(columns: Sequence[Column],
               rows: Iterable[Mapping[str, Any]]) -> Iterator[str]:
    """Yield the CSV text chunk by chunk: header first, then one per row."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow([c.label for c in columns])
    yield buf.getvalue()
    for row in rows:
        buf.seek(0)
        buf.truncate()
        writer.writerow([_cell(row[c.key], c) for c in columns])
        yield buf.getvalue()
