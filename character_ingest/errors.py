"""
Ingestion error taxonomy.

Fatal errors abort one ingestion call and carry remediation hints for the
caller. Per-row conditions are tallied in the report instead, except for
``MissingName`` which the normalizer raises and the pipeline catches.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .report import IngestionReport


class IngestionError(ValueError):
    """
    Base class for errors that fail a whole ingestion call.
    """

    kind = "IngestionError"
    default_hints: tuple[str, ...] = ()

    def __init__(self, message: str, *, hints: Sequence[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hints = tuple(hints) if hints is not None else self.default_hints

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind,
            "message": self.message,
            "hints": list(self.hints),
        }


class EmptyInput(IngestionError):
    kind = "EmptyInput"
    default_hints = ("Paste or upload the data to import.",)


class InvalidEncoding(IngestionError):
    kind = "InvalidEncoding"
    default_hints = ("Re-save the file as UTF-8 and upload it again.",)


class EmptyHeader(IngestionError):
    kind = "EmptyHeader"
    default_hints = ("The first row must list the field names.",)


class TooFewRows(IngestionError):
    kind = "TooFewRows"
    default_hints = (
        "Make sure the data has a header row and at least one data row.",
        "Check for blank lines at the start or end of the data.",
    )


class InvalidJsonShape(IngestionError):
    kind = "InvalidJsonShape"
    default_hints = ("JSON imports must be an array of objects.",)


class NoRecordsParsed(IngestionError):
    """
    Raised when a run finished without a single accepted record.
    """

    kind = "NoRecordsParsed"

    def __init__(self, message: str, *, report: "IngestionReport") -> None:
        super().__init__(message, hints=hints_for(report))
        self.report = report

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        payload["reasons"] = self.report.reason_counts()
        return payload


class MissingName(ValueError):
    """
    Raised by the normalizer when a row resolves to an empty name.
    """


def hints_for(report: "IngestionReport") -> tuple[str, ...]:
    """
    Pick remediation hints from the dominant skip reasons of a run.
    """

    counts = report.reason_counts()
    hints: list[str] = []
    if counts.get("fieldCountMismatch"):
        hints.append("Check field counts against the header.")
        hints.append("Look for stray delimiters or missing quotes in the data rows.")
    if counts.get("missingName"):
        hints.append("The name column is required and must not be blank.")
    if counts.get("processingError"):
        hints.append("Some rows could not be converted; compare them with the template.")
    if not hints:
        hints.append("Compare the data with the downloadable template.")
    return tuple(hints)
