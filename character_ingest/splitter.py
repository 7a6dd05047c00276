"""
Logical row splitting.

Row boundaries follow quote balance rather than raw newlines, so a quoted
field holding line breaks stays in one logical row.
"""

from __future__ import annotations

from .rules import FIELD_QUOTE


def _scan_quotes(line: str, closer: str) -> str:
    """
    Scan one physical line and return the closer still pending at its end.
    """
    j = 0
    while j < len(line):
        char = line[j]
        if not closer:
            if char == FIELD_QUOTE:
                closer = FIELD_QUOTE
        elif char == closer:
            if j + 1 < len(line) and line[j + 1] == closer:
                j += 1
            else:
                closer = ""
        j += 1
    return closer


def split_rows(text: str) -> list[str]:
    rows: list[str] = []
    buffer: list[str] = []
    closer = ""

    for line in text.split("\n"):
        if not buffer and not line.strip():
            continue

        closer = _scan_quotes(line, closer)
        buffer.append(line)

        if not closer:
            row = "\n".join(buffer).strip()
            if row:
                rows.append(row)
            buffer = []

    # Unterminated quote: keep what we have instead of failing
    if buffer:
        row = "\n".join(buffer).strip()
        if row:
            rows.append(row)

    return rows
