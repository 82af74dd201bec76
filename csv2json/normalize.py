"""
Document normalization ahead of parsing.

Responsibilities:
- bytes -> text (UTF-8 first, charset detection as fallback)
- newline normalization (CRLF/CR -> LF) with a before/after count
- leading byte-order-mark removal
"""

from __future__ import annotations

import logging
from typing import Dict, Tuple

from charset_normalizer import from_bytes

from .rules import BOM

logger = logging.getLogger(__name__)


def decode_document(raw: bytes) -> Tuple[str, str]:
    """
    Decode input bytes to text.

    Rules:
    - Strict UTF-8 first. A UTF-8 BOM survives as U+FEFF and is stripped later by the parser.
    - Otherwise detect the encoding best-effort via charset-normalizer.
    - If decoding with the guess still fails, decode with replacement characters.
    Returns (text, encoding_used).
    """
    try:
        return raw.decode("utf-8"), "utf-8"
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    detected = match.encoding if match is not None else None
    logger.debug("input is not UTF-8, detected encoding: %s", detected)

    decode_used = detected or "utf-8"
    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        # Last resort: decode with replacement so conversion can continue deterministically
        logger.warning("could not decode input as %s, replacing invalid bytes", decode_used)
        text = raw.decode("utf-8", errors="replace")
        decode_used = "utf-8"

    return text, decode_used


def count_newlines(text: str) -> Dict[str, int]:
    crlf = text.count("\r\n")
    return {
        "crlf": crlf,
        "cr": text.count("\r") - crlf,
        "lf": text.count("\n") - crlf,
    }


def normalize_newlines(text: str) -> str:
    """CRLF first, then any bare CR left over, both to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def strip_bom(text: str) -> str:
    """Remove exactly one leading byte-order-mark."""
    if text.startswith(BOM):
        return text[len(BOM):]
    return text
