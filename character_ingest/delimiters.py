"""
Delimiter detection and standardization.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .rules import DELIMITER_CANDIDATES, DOCUMENT_DEFAULT_DELIMITER, FIELD_QUOTE

logger = logging.getLogger(__name__)


def detect_delimiter(
    sample: str,
    default: str = DOCUMENT_DEFAULT_DELIMITER,
    candidates: Sequence[str] = DELIMITER_CANDIDATES,
) -> str:
    """
    Return the candidate occurring most often in ``sample``.

    Ties go to the earlier candidate; ``default`` is returned when no
    candidate occurs at all.
    """
    best = default
    best_count = 0
    for candidate in candidates:
        count = sample.count(candidate)
        if count > best_count:
            best = candidate
            best_count = count
    return best


def standardize_delimiters(text: str, default: str = DOCUMENT_DEFAULT_DELIMITER) -> tuple[str, str]:
    """
    Rewrite the dominant document delimiter to a comma outside quoted spans.

    Returns the rewritten text and the delimiter that was detected.
    """
    detected = detect_delimiter(text, default=default)
    if detected == ",":
        return text, detected

    out: list[str] = []
    closer = ""
    i = 0
    while i < len(text):
        char = text[i]
        if closer:
            if char == closer:
                if i + 1 < len(text) and text[i + 1] == closer:
                    out.append(char * 2)
                    i += 2
                    continue
                closer = ""
            out.append(char)
        elif char == FIELD_QUOTE:
            closer = FIELD_QUOTE
            out.append(char)
        elif char == detected:
            out.append(",")
        else:
            out.append(char)
        i += 1

    logger.info("Standardized delimiter %r to ','", detected)
    return "".join(out), detected
