"""Pre-compiled regex patterns for the gym report tools.

All patterns are compiled once at module import.

Usage:
    from utils.patterns import WORD_SEPARATORS, ISO_DATE

    if ISO_DATE.match(value):
        ...
"""

import re

# Runs of hyphens/underscores inside a URL segment ("bar-baz", "client_management")
WORD_SEPARATORS = re.compile(r'[-_]+')

# Whitespace normalization: multiple spaces/tabs/newlines
WHITESPACE = re.compile(r'\s+')

# ISO calendar date as sent by HTML date inputs: "2025-06-15"
ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')

# Characters that are unsafe inside a download filename
FILENAME_UNSAFE = re.compile(r'[^A-Za-z0-9._-]+')

# filename parameter of a Content-Disposition header, quoted or bare
CONTENT_DISPOSITION_FILENAME = re.compile(r'filename\s*=\s*"?([^";]+)"?', re.IGNORECASE)
