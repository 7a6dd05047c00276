"""
Per-run outcome accounting.

One report is created per ingestion call, filled while rows are processed
and closed before it is handed back to the caller.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from .models import CanonicalRecord, IngestionReportModel, QualitySummary, ReportSummary, SkipDetail
from .rules import DEFAULT_TAG, PREVIEW_CHARS

EMPTY_LINE = "emptyLine"
FIELD_COUNT_MISMATCH = "fieldCountMismatch"
MISSING_NAME = "missingName"
PROCESSING_ERROR = "processingError"

SKIP_REASONS = (EMPTY_LINE, FIELD_COUNT_MISMATCH, MISSING_NAME, PROCESSING_ERROR)


@dataclass
class IngestionReport:
    dialect: str
    max_skip_details: int = 50
    header_rows: int = 0
    total_rows: int = 0
    accepted: int = 0
    delimiter: Optional[str] = None
    encoding: Optional[str] = None
    header: tuple[str, ...] = ()
    header_synthesized: bool = False
    reasons: Counter = field(default_factory=Counter)
    skip_details: list[SkipDetail] = field(default_factory=list)
    type_distribution: Counter = field(default_factory=Counter)
    quality: Counter = field(default_factory=Counter)
    closed: bool = False

    def _check_open(self) -> None:
        if self.closed:
            raise RuntimeError("Ingestion report is closed.")

    def record_accepted(self, record: CanonicalRecord) -> None:
        self._check_open()
        self.accepted += 1
        self.type_distribution[record.type] += 1
        if record.description:
            self.quality["with_description"] += 1
        if record.prompt:
            self.quality["with_prompt"] += 1
        if record.tags != (DEFAULT_TAG,):
            self.quality["with_tags"] += 1
        if record.is_official:
            self.quality["official"] += 1

    def record_skip(self, reason: str, row: int, content: str = "") -> None:
        if reason not in SKIP_REASONS:
            raise ValueError(f"Unknown skip reason: {reason!r}")
        self._check_open()
        self.reasons[reason] += 1
        if len(self.skip_details) < self.max_skip_details:
            self.skip_details.append(
                SkipDetail(row=row, reason=reason, preview=content[:PREVIEW_CHARS])
            )

    def close(self) -> "IngestionReport":
        self.closed = True
        return self

    def reason_counts(self) -> dict[str, int]:
        return {reason: self.reasons.get(reason, 0) for reason in SKIP_REASONS}

    @property
    def skipped(self) -> int:
        return sum(self.reasons.values())

    @property
    def data_rows(self) -> int:
        return max(0, self.total_rows - self.header_rows)

    @property
    def success_rate(self) -> float:
        if not self.data_rows:
            return 0.0
        return self.accepted / self.data_rows

    def low_yield(self, expected: Optional[int] = None, ratio: float = 0.8) -> bool:
        """
        True when far fewer records were accepted than expected.

        Without an explicit expectation the number of data rows is used.
        """
        target = self.data_rows if expected is None else expected
        return target > 0 and self.accepted < target * ratio

    def issues(self) -> list[str]:
        found: list[str] = []
        if self.reasons[MISSING_NAME]:
            found.append(f"{self.reasons[MISSING_NAME]} rows are missing a name")
        if self.reasons[FIELD_COUNT_MISMATCH]:
            found.append(f"{self.reasons[FIELD_COUNT_MISMATCH]} rows have fewer fields than the header")
        with_description = self.quality["with_description"]
        if self.accepted and with_description < self.accepted * 0.8:
            found.append(f"{self.accepted - with_description} records have no description")
        return found

    def to_model(self, expected: Optional[int] = None, ratio: float = 0.8) -> IngestionReportModel:
        return IngestionReportModel(
            dialect=self.dialect,
            encoding=self.encoding,
            delimiter=self.delimiter,
            header=list(self.header),
            header_synthesized=self.header_synthesized,
            summary=ReportSummary(
                total_rows=self.total_rows,
                data_rows=self.data_rows,
                accepted=self.accepted,
                skipped=self.skipped,
                success_rate=round(self.success_rate, 4),
                low_yield=self.low_yield(expected, ratio),
            ),
            reasons=self.reason_counts(),
            skipped=list(self.skip_details),
            type_distribution=dict(self.type_distribution),
            quality=QualitySummary(**self.quality),
            issues=self.issues(),
        )
