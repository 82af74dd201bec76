"""
Deterministic parsing rules.

This file exists to make the fixed parts of the format explicit and enforceable.
"""

from __future__ import annotations

import os

from .errors import UsageError

DEFAULT_DELIMITER = ","
QUOTE_CHAR = '"'
BOM = "\ufeff"
LINE_BREAK = "\n"

# Characters a blank-line check ignores: ECMAScript WhiteSpace and LineTerminator.
# Unlike str.isspace this includes U+FEFF and excludes \x1c-\x1f and \x85.
BLANK_CHARS = (
    "\t\n\x0b\x0c\r \xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005"
    "\u2006\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)

# Default delimiter for the CLI and HTTP API; the parser itself always defaults to ","
INPUT_DELIMITER = os.getenv("CSV2JSON_DELIMITER", DEFAULT_DELIMITER)

LOG_LEVEL = os.getenv("CSV2JSON_LOG_LEVEL", "WARNING").upper()
MAX_UPLOAD_BYTES = int(os.getenv("CSV2JSON_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))  # 10 MB

ALLOWED_EXTENSIONS = (".csv", ".tsv", ".txt")

# Spellings accepted for TAB on the command line, where a literal tab is awkward to type
_TAB_ALIASES = {"\\t": "\t", "tab": "\t", "TAB": "\t"}


def resolve_delimiter(value: str | None) -> str:
    """
    Validate a user-supplied delimiter.

    Rules:
    - Exactly one character, used verbatim.
    - "\\t" and "tab" stand for TAB.
    - The quote character and line breaks can never be delimiters.
    """
    if value is None:
        raise UsageError("delimiter requires a value")

    value = _TAB_ALIASES.get(value, value)

    if len(value) != 1:
        raise UsageError(f"delimiter must be a single character, got {value!r}")
    if value == QUOTE_CHAR or value in ("\r", "\n"):
        raise UsageError(f"delimiter cannot be {value!r}")
    return value
