"""Output formatting utilities for the gym report tools.

Provides reusable functions for:
- Formatting money amounts and counts
- Tabular report output for the terminal dashboard
"""

from typing import Any, List, Optional, Tuple


def format_amount(value: Optional[float], precision: int = 2) -> str:
    """Format a money amount for display.

    Examples:
        format_amount(1234.5)  -> "1,234.50"
        format_amount(None)    -> "-"
    """
    if value is None:
        return "-"
    try:
        return f"{float(value):,.{precision}f}"
    except (TypeError, ValueError):
        return "-"


def format_count(value: Optional[int]) -> str:
    """Format an integer count with thousands separators ("-" for None)."""
    if value is None:
        return "-"
    return f"{int(value):,}"


def format_cell(value: Any) -> str:
    """Render a record value for a table cell."""
    if value is None:
        return "-"
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        return format_amount(value)
    if isinstance(value, int):
        return format_count(value)
    return str(value)


class TableFormatter:
    """Aligned plain-text table for the terminal dashboard.

    Numeric cells (ints and floats) are right-aligned, everything else is
    left-aligned.  Column widths grow to fit the widest cell.
    """

    def __init__(self, columns: List[str], column_widths: Optional[List[int]] = None):
        self.columns = list(columns)
        self.column_widths = list(column_widths or (len(c) for c in self.columns))
        self.rows: List[List[Tuple[str, bool]]] = []

    def add_row(self, values: List[Any]) -> None:
        """Append one row; raises ValueError on a column count mismatch."""
        if len(values) != len(self.columns):
            raise ValueError(f"Expected {len(self.columns)} values, got {len(values)}")
        row = []
        for i, value in enumerate(values):
            text = format_cell(value)
            numeric = isinstance(value, (int, float)) and not isinstance(value, bool)
            self.column_widths[i] = max(self.column_widths[i], len(text))
            row.append((text, numeric))
        self.rows.append(row)

    def _line(self, cells: List[Tuple[str, bool]]) -> str:
        padded = (
            text.rjust(width) if numeric else text.ljust(width)
            for (text, numeric), width in zip(cells, self.column_widths)
        )
        return "  ".join(padded).rstrip()

    def to_string(self, show_header: bool = True, show_separator: bool = True) -> str:
        lines = []
        if show_header:
            lines.append(self._line([(c, False) for c in self.columns]))
            if show_separator:
                lines.append("  ".join("-" * w for w in self.column_widths))
        lines.extend(self._line(row) for row in self.rows)
        return "\n".join(lines)
