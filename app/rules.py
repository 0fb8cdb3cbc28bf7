"""
Deterministic loading and grouping rules.

This file exists to make the parsing contract explicit and enforceable.
"""

# Tested in this order; on a tie the earlier candidate wins.
DELIMITER_CANDIDATES = ("\t", ",", ";", "|")
DEFAULT_DELIMITER = ","
DELIMITER_NAMES = {
    "\t": "tab",
    ",": "comma",
    ";": "semicolon",
    "|": "pipe",
}

QUOTE_CHAR = '"'
ESCAPE_CHAR = "\\"
SAMPLE_LINE_LIMIT = 10

BOM = "\ufeff"

COL_TITLE = "Title"
COL_LINK = "Link"
COL_REFERENCE_LINK = "Reference Link"
COL_DESCRIPTION = "Description"
COL_TAGLINES = "Taglines"
COL_ICON = "Icon"

FALLBACK_TAG = "Other"
FALLBACK_TITLES = ("SOPs", "Jira Tickets")

PHASE_PATTERN = r"phase\s*(\d{1,18})(?!\d)"

ALLOWED_UPLOAD_SUFFIXES = (".csv", ".tsv", ".txt")

# "" covers relative links and "#" fragments
SAFE_LINK_SCHEMES = ("", "http", "https")
