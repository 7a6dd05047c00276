"""
Field tokenization for one logical row.

Rows holding an ASCII double quote go through a quote-aware scan that treats
every known delimiter as a field terminator. Rows without one are split on the
single dominant delimiter of the line.
"""

from __future__ import annotations

from .delimiters import detect_delimiter
from .rules import FIELD_QUOTE, LINE_DEFAULT_DELIMITER, WRAPPING_QUOTES

FIELD_TERMINATORS = frozenset(",，;；\t")


def clean_value(value: object) -> str:
    if not isinstance(value, str):
        return ""

    value = value.strip()

    for opener, closer in WRAPPING_QUOTES:
        if len(value) > 1 and value.startswith(opener) and value.endswith(closer):
            value = value[1:-1]
            break

    value = value.replace('""', '"')
    value = value.replace('\\"', '"')
    value = value.replace("\\n", "\n")
    value = value.replace("\\t", "\t")

    return value.strip()


def split_unquoted(row: str) -> list[str]:
    separator = detect_delimiter(row, default=LINE_DEFAULT_DELIMITER)
    return [clean_value(field) for field in row.split(separator)]


def tokenize_row(row: str) -> list[str]:
    """
    Turn one logical row into its ordered list of cleaned field values.
    """
    if not row or not row.strip():
        return []

    if FIELD_QUOTE not in row:
        return split_unquoted(row)

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(row):
        char = row[i]
        if char == FIELD_QUOTE:
            if in_quotes and i + 1 < len(row) and row[i + 1] == FIELD_QUOTE:
                current.append(FIELD_QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif char in FIELD_TERMINATORS and not in_quotes:
            fields.append(clean_value("".join(current)))
            current = []
        else:
            current.append(char)
        i += 1

    fields.append(clean_value("".join(current)))
    return fields
