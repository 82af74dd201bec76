"""
Quote-aware splitting.

Two scans share the same quoting rule:
- iter_logical_lines cuts normalized text into records at line breaks outside quotes
- split_line cuts one record into raw fields at delimiters outside quotes
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, List

from .rules import DEFAULT_DELIMITER, LINE_BREAK, QUOTE_CHAR


class QuoteState(Enum):
    NORMAL = "normal"
    QUOTED = "quoted"

    def toggled(self) -> "QuoteState":
        return QuoteState.NORMAL if self is QuoteState.QUOTED else QuoteState.QUOTED


def split_line(line: str, delimiter: str = DEFAULT_DELIMITER) -> List[str]:
    """
    Split one logical line into raw field strings.

    Rules:
    - '"' toggles the quote state, except '""' inside quotes, which is one literal '"'.
    - The delimiter ends a field only in NORMAL state.
    - Everything else is kept as-is.
    - An unterminated quote just ends with the line.
    """
    fields: List[str] = []
    current: List[str] = []
    state = QuoteState.NORMAL

    i = 0
    n = len(line)
    while i < n:
        char = line[i]

        if char == QUOTE_CHAR:
            if state is QuoteState.QUOTED and i + 1 < n and line[i + 1] == QUOTE_CHAR:
                current.append(QUOTE_CHAR)
                i += 1  # skip escaped quote
            else:
                state = state.toggled()
        elif char == delimiter and state is QuoteState.NORMAL:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current))
    return fields


def iter_logical_lines(text: str) -> Iterator[str]:
    """
    Yield records from LF-normalized text, keeping line breaks that sit inside quotes.

    An escaped '""' flips the state twice, so counting quotes is enough to know
    whether a line break is structural.
    """
    start = 0
    state = QuoteState.NORMAL

    for i, char in enumerate(text):
        if char == QUOTE_CHAR:
            state = state.toggled()
        elif char == LINE_BREAK and state is QuoteState.NORMAL:
            yield text[start:i]
            start = i + 1

    yield text[start:]
