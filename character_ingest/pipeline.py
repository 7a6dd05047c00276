"""
Ingestion pipeline.

Text path:
    preprocess -> delimiter standardization -> logical rows -> header
    -> per row: tokenize, field count reconciliation, normalize

JSON path feeds parsed objects straight into the normalizer.

Every call owns its own report and output list; nothing is shared between
calls.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .config import IngestionSettings, get_ingestion_settings
from .dialects import CSV, JSON, Dialect, detect_dialect, get_dialect
from .delimiters import standardize_delimiters
from .errors import EmptyInput, InvalidJsonShape, MissingName, NoRecordsParsed, TooFewRows
from .headers import resolve_header
from .logging_utils import log_event
from .models import CanonicalRecord
from .normalize import FieldNormalizer
from .preprocess import BOM, normalize_text
from .report import (
    EMPTY_LINE,
    FIELD_COUNT_MISMATCH,
    MISSING_NAME,
    PROCESSING_ERROR,
    IngestionReport,
)
from .splitter import split_rows
from .tokenizer import tokenize_row

logger = logging.getLogger(__name__)

DialectLike = Union[Dialect, str]


@dataclass(frozen=True)
class IngestionResult:
    records: tuple[CanonicalRecord, ...]
    report: IngestionReport


def _as_dialect(dialect: Optional[DialectLike]) -> Optional[Dialect]:
    if dialect is None or isinstance(dialect, Dialect):
        return dialect
    return get_dialect(dialect)


def _skip(
    report: IngestionReport,
    settings: IngestionSettings,
    reason: str,
    row_number: int,
    content: str,
) -> None:
    report.record_skip(reason, row_number, content)
    if settings.log_row_details:
        logger.warning(
            "Skipped row=%s reason=%s content=%r",
            row_number,
            reason,
            content[:100],
        )


def _finish(
    report: IngestionReport,
    records: list[CanonicalRecord],
    settings: IngestionSettings,
) -> IngestionResult:
    report.close()
    log_event(
        logger,
        logging.INFO,
        "ingestion_completed",
        dialect=report.dialect,
        data_rows=report.data_rows,
        accepted=report.accepted,
        reasons=report.reason_counts(),
    )

    if not records:
        raise NoRecordsParsed(
            "No records were parsed; check the input format.",
            report=report,
        )

    if report.low_yield(ratio=settings.low_yield_ratio):
        logger.warning(
            "Low yield ingestion accepted=%s data_rows=%s reasons=%s",
            report.accepted,
            report.data_rows,
            report.reason_counts(),
        )

    return IngestionResult(records=tuple(records), report=report)


def ingest_text(
    text: str,
    dialect: DialectLike = CSV,
    *,
    normalizer: Optional[FieldNormalizer] = None,
    settings: Optional[IngestionSettings] = None,
    encoding: Optional[str] = None,
) -> IngestionResult:
    """
    Parse delimited text into canonical records plus a report.

    Raises an ``IngestionError`` subclass when the whole call fails; row
    level problems are tallied in the report instead.
    """
    dialect = _as_dialect(dialect) or CSV
    normalizer = normalizer or FieldNormalizer()
    settings = settings or get_ingestion_settings()

    text = normalize_text(text or "")
    if not text:
        raise EmptyInput("Input must not be empty.")

    text, delimiter = standardize_delimiters(text, dialect.document_default_delimiter)
    rows = split_rows(text)
    if len(rows) < 2:
        raise TooFewRows(f"Expected a header and at least one data row, got {len(rows)} row(s).")

    header = resolve_header(rows[0], rows[1:], dialect)

    report = IngestionReport(
        dialect=dialect.name,
        max_skip_details=settings.max_skip_details,
        header_rows=1,
        total_rows=len(rows),
        delimiter=delimiter,
        encoding=encoding,
        header=header.keys,
        header_synthesized=header.synthesized,
    )
    records: list[CanonicalRecord] = []

    for row_number, row in enumerate(rows[1:], start=2):
        if not row.strip():
            _skip(report, settings, EMPTY_LINE, row_number, row)
            continue

        values = tokenize_row(row)
        if len(values) < len(header):
            _skip(report, settings, FIELD_COUNT_MISMATCH, row_number, row)
            continue
        if len(values) > len(header):
            logger.debug(
                "Row %s has %s fields, keeping the first %s",
                row_number,
                len(values),
                len(header),
            )
            values = values[: len(header)]

        try:
            record = normalizer.normalize(dict(zip(header.keys, values)))
        except MissingName:
            _skip(report, settings, MISSING_NAME, row_number, row)
            continue
        except Exception as exc:  # noqa: BLE001
            logger.warning("Row %s could not be normalized: %s", row_number, exc)
            _skip(report, settings, PROCESSING_ERROR, row_number, row)
            continue

        records.append(record)
        report.record_accepted(record)

    return _finish(report, records, settings)


def ingest_json(
    payload: Any,
    *,
    normalizer: Optional[FieldNormalizer] = None,
    settings: Optional[IngestionSettings] = None,
    encoding: Optional[str] = None,
) -> IngestionResult:
    """
    Normalize a JSON array of objects, given as text or already parsed.
    """
    normalizer = normalizer or FieldNormalizer()
    settings = settings or get_ingestion_settings()

    if isinstance(payload, str):
        payload = payload.lstrip(BOM).strip()
        if not payload:
            raise EmptyInput("Input must not be empty.")
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise InvalidJsonShape(f"Input is not valid JSON: {exc.msg} (line {exc.lineno}).") from exc

    if not isinstance(payload, list):
        raise InvalidJsonShape("JSON data must be an array.")

    report = IngestionReport(
        dialect=JSON.name,
        max_skip_details=settings.max_skip_details,
        total_rows=len(payload),
        encoding=encoding,
    )
    records: list[CanonicalRecord] = []

    for item_number, item in enumerate(payload, start=1):
        preview = json.dumps(item, ensure_ascii=False, default=str)
        if not isinstance(item, Mapping):
            _skip(report, settings, PROCESSING_ERROR, item_number, preview)
            continue

        try:
            record = normalizer.normalize(item)
        except MissingName:
            _skip(report, settings, MISSING_NAME, item_number, preview)
            continue
        except Exception as exc:  # noqa: BLE001
            logger.warning("Item %s could not be normalized: %s", item_number, exc)
            _skip(report, settings, PROCESSING_ERROR, item_number, preview)
            continue

        records.append(record)
        report.record_accepted(record)

    return _finish(report, records, settings)


def ingest(
    text: str,
    dialect: Optional[DialectLike] = None,
    *,
    filename: Optional[str] = None,
    normalizer: Optional[FieldNormalizer] = None,
    settings: Optional[IngestionSettings] = None,
    encoding: Optional[str] = None,
) -> IngestionResult:
    """
    Ingest one payload, detecting the dialect when none is given.
    """
    if text is None or not text.strip():
        raise EmptyInput("Input must not be empty.")

    resolved = _as_dialect(dialect) or detect_dialect(text, filename)
    if resolved.is_json:
        return ingest_json(text, normalizer=normalizer, settings=settings, encoding=encoding)
    return ingest_text(text, resolved, normalizer=normalizer, settings=settings, encoding=encoding)
