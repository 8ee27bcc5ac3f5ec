"""Date helpers for report filters."""

from datetime import date, timedelta

DATE_PRESETS = ("last-7-days", "last-30-days", "last-90-days",
                "this-month", "last-month")
DEFAULT_DATE_PRESET = "last-30-days"

_TRAILING_DAYS = {"last-7-days": 7, "last-30-days": 30, "last-90-days": 90}


def resolve_date_preset(preset: str, today: date | None = None) -> tuple[date, date]:
    """Turn a relative range name into an inclusive (start, end) pair.

    ``last-N-days`` runs from N days ago through today; ``this-month`` from
    the 1st through today; ``last-month`` covers the whole previous month.
    Unknown names fall back to the last 30 days.
    """
    today = today or date.today()
    if preset == "this-month":
        return today.replace(day=1), today
    if preset == "last-month":
        end = today.replace(day=1) - timedelta(days=1)
        return end.replace(day=1), end
    days = _TRAILING_DAYS.get(preset, _TRAILING_DAYS[DEFAULT_DATE_PRESET])
    return today - timedelta(days=days), today


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD, raising ValueError with the offending value."""
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValueError(f"Invalid date: '{value}'. Expected YYYY-MM-DD") from None
