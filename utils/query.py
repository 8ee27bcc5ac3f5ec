"""Shared filter and SQL query builder utilities for the report routes.

Provides the sentinel-stripping used on both sides of the report contract
and the WHERE clause assembly used by the report engine.
"""

from collections.abc import Iterable, Mapping
from typing import Any

# Dropdown values meaning "no filter"; never sent and never applied.
FILTER_SENTINELS = frozenset({"all", ""})


def is_sentinel(value: Any) -> bool:
    """True for None, "all" and blank strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() in FILTER_SENTINELS
    return False


def clean_filters(filters: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a copy of ``filters`` without sentinel values.

    Example:
        {"branchId": "all", "search": "john"} -> {"search": "john"}
    """
    if not filters:
        return {}
    return {k: v for k, v in filters.items() if not is_sentinel(v)}


def build_where_clause(
    conditions: Iterable[tuple[str, list[Any]]],
    base_conditions: Iterable[str] = (),
) -> tuple[str, list[Any]]:
    """Build a SQL WHERE clause from fixed and parameterised conditions.

    Args:
        conditions: (sql_fragment, params) pairs, one per applied filter.
            Fragments use ``?`` placeholders.
        base_conditions: Parameterless fragments every query carries
            (e.g. ``p.status = 'completed'``).

    Returns:
        Tuple of (where_clause_string, params_list). The where_clause_string
        starts with "WHERE " if any conditions exist, or is "" if none.
    """
    fragments: list[str] = list(base_conditions)
    params: list[Any] = []
    for fragment, values in conditions:
        fragments.append(fragment)
        params.extend(values)
    if not fragments:
        return "", params
    return "WHERE " + " AND ".join(f"({f})" for f in fragments), params
