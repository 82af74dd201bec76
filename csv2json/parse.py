"""
Record assembly: normalized text -> ordered list of header-keyed records.

Policy (never raises on malformed text):
- first logical line is the header
- blank data lines produce no record
- short rows: missing positions become MISSING (None), not ""
- long rows: values past the header are dropped
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from .normalize import count_newlines, normalize_newlines, strip_bom
from .rules import BLANK_CHARS, DEFAULT_DELIMITER
from .splitter import iter_logical_lines, split_line

logger = logging.getLogger(__name__)

MISSING = None

FieldValue = Optional[str]
Record = Dict[str, FieldValue]


def _logical_lines(text: str, multiline: bool) -> List[str]:
    if multiline:
        return list(iter_logical_lines(text))
    return text.split("\n")


def _assemble(
    document: str, delimiter: str, multiline: bool
) -> Tuple[List[Record], Dict[str, Any]]:
    lines = _logical_lines(normalize_newlines(document), multiline)

    stats: Dict[str, Any] = {
        "columns": 0,
        "short_rows": 0,
        "long_rows": 0,
        "blank_lines": 0,
    }
    if not lines:
        return [], stats

    lines[0] = strip_bom(lines[0])
    headers = split_line(lines[0], delimiter)
    stats["columns"] = len(headers)

    records: List[Record] = []
    for line_no, line in enumerate(lines[1:], start=2):
        if line.strip(BLANK_CHARS) == "":
            stats["blank_lines"] += 1
            continue

        values = split_line(line, delimiter)
        if len(values) < len(headers):
            stats["short_rows"] += 1
            logger.debug("line %d: %d of %d fields, rest missing", line_no, len(values), len(headers))
        elif len(values) > len(headers):
            stats["long_rows"] += 1
            logger.debug("line %d: %d extra fields dropped", line_no, len(values) - len(headers))

        record: Record = {}
        for i, name in enumerate(headers):
            # later duplicate header names overwrite earlier ones
            record[name] = values[i] if i < len(values) else MISSING
        records.append(record)

    logger.debug("parsed %d records with %d columns", len(records), len(headers))
    return records, stats


def parse_csv(
    document: str, delimiter: str = DEFAULT_DELIMITER, multiline: bool = True
) -> List[Record]:
    """
    Parse delimited text into records.

    With multiline=False the text is cut at every line break before quote
    handling, so a quoted field cannot span lines.
    """
    records, _ = _assemble(document, delimiter, multiline)
    return records


def parse_with_report(
    document: str, delimiter: str = DEFAULT_DELIMITER, multiline: bool = True
) -> Tuple[List[Record], Dict[str, Any]]:
    """Parse and also describe what the parser had to smooth over."""
    records, stats = _assemble(document, delimiter, multiline)
    report = {
        "rows": len(records),
        "delimiter": delimiter,
        "newlines": count_newlines(document),
        **stats,
    }
    return records, report
