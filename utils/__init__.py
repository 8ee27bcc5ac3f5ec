"""Shared utilities for the gym report tools."""

# Pattern definitions
from utils.patterns import ISO_DATE, WORD_SEPARATORS

# String utilities
from utils.strings import normalize_whitespace, slugify, titleize

# Filter / SQL helpers
from utils.query import FILTER_SENTINELS, build_where_clause, clean_filters, is_sentinel

# Pagination
from utils.pagination import (
    DEFAULT_PAGE_SIZE,
    PageWindow,
    clamp_page,
    page_count,
    page_offset,
)

# Dates
from utils.dates import DATE_PRESETS, parse_iso_date, resolve_date_preset

# Output formatting
from utils.formatting import format_amount, format_count, TableFormatter

# Configuration
from utils.config import AppConfig, Config

# HTTP
from utils.http import SessionManager

__all__ = [
    # Patterns
    "ISO_DATE",
    "WORD_SEPARATORS",
    # Strings
    "normalize_whitespace",
    "slugify",
    "titleize",
    # Query
    "FILTER_SENTINELS",
    "build_where_clause",
    "clean_filters",
    "is_sentinel",
    # Pagination
    "DEFAULT_PAGE_SIZE",
    "PageWindow",
    "clamp_page",
    "page_count",
    "page_offset",
    # Dates
    "DATE_PRESETS",
    "parse_iso_date",
    "resolve_date_preset",
    # Formatting
    "format_amount",
    "format_count",
    "TableFormatter",
    # Config
    "AppConfig",
    "Config",
    # HTTP
    "SessionManager",
]
