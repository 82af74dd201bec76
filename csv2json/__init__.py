from .parse import MISSING, Record, parse_csv, parse_with_report
from .splitter import QuoteState, iter_logical_lines, split_line

__all__ = [
    "MISSING",
    "QuoteState",
    "Record",
    "iter_logical_lines",
    "parse_csv",
    "parse_with_report",
    "split_line",
]
