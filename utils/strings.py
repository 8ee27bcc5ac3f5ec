"""String processing utilities for the gym report tools."""

from utils.patterns import FILENAME_UNSAFE, WHITESPACE, WORD_SEPARATORS


def normalize_whitespace(s: str) -> str:
    """Normalize multiple whitespace characters to single spaces.

    Example:
        "Client   Management\\n" -> "Client Management"
    """
    return WHITESPACE.sub(' ', s).strip()


def titleize(value: str | None) -> str:
    """Turn a URL slug into a display label.

    Hyphens and underscores become spaces and the first letter of every
    word is upper-cased; the rest of each word is left untouched so
    acronyms in the slug survive.

    Examples:
        "bar-baz"            -> "Bar Baz"
        "client_management"  -> "Client Management"
        "dsr"                -> "Dsr"
        ""                   -> ""
    """
    if not value:
        return ""
    words = WORD_SEPARATORS.sub(" ", value).split(" ")
    return " ".join(w[:1].upper() + w[1:] for w in words)


def slugify(value: str) -> str:
    """Lower-case a label and collapse unsafe characters to single hyphens.

    Used for the qualifier parts of download filenames.

    Example:
        "Last 7 Days" -> "last-7-days"
    """
    slug = FILENAME_UNSAFE.sub("-", normalize_whitespace(str(value)).lower())
    return slug.strip("-")
