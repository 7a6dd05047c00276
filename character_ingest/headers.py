"""
Header resolution and repair.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .dialects import CSV, Dialect
from .errors import EmptyHeader
from .rules import CANONICAL_FIELDS
from .tokenizer import tokenize_row

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeaderSpec:
    """
    Resolved header: canonical keys in column order.
    """

    keys: tuple[str, ...]
    original: tuple[str, ...]
    synthesized: bool = False

    def __len__(self) -> int:
        return len(self.keys)


def synthesize_header(field_count: int) -> tuple[str, ...]:
    names = list(CANONICAL_FIELDS)
    for position in range(len(names) + 1, field_count + 1):
        names.append(f"field{position}")
    return tuple(names[:field_count])


def resolve_header(
    header_row: str,
    data_rows: Sequence[str],
    dialect: Dialect = CSV,
) -> HeaderSpec:
    """
    Resolve the header row, synthesizing one when no field name is known.

    A synthesized header takes its length from the first data row.
    """
    original = tuple(tokenize_row(header_row))
    fields = original
    synthesized = False

    if not dialect.looks_standard(list(original)) and data_rows:
        field_count = len(tokenize_row(data_rows[0]))
        fields = synthesize_header(field_count)
        synthesized = True
        logger.info(
            "Non-standard header %r, synthesized %d canonical fields",
            list(original),
            len(fields),
        )

    if not fields:
        raise EmptyHeader("No usable header fields were found.")

    return HeaderSpec(
        keys=tuple(dialect.canonical_key(name) for name in fields),
        original=original,
        synthesized=synthesized,
    )
