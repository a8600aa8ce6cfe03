"""
app/domain/defect_ingestion.py

Domain models used by the defect CSV ingestion flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

# Original header text -> cell text for one parsed data line.
RawRow = dict[str, str]


class RowResult:
    INSERTED = "inserted"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class NormalizedDefectRow:
    """
    Field values after header resolution, coercion and defaulting.

    ``date_reported`` is None when the source text did not parse; the raw
    text is kept so validation can cite it.
    """

    date_reported: date | None
    raw_date_reported: str
    module: str
    test_case_id: str | None
    summary: str | None
    expected_result: str
    actual_result: str
    severity: str
    priority: str
    status: str
    date_fixed: date | None
    qc_status_bbt: str
    assigned_to: str | None = None


@dataclass(frozen=True)
class CanonicalDefectInput:
    """
    Validated defect ready for persistence.
    """

    date_reported: date
    module: str
    test_case_id: str | None
    summary: str | None
    expected_result: str
    actual_result: str
    severity: str
    priority: str
    status: str
    date_fixed: date | None
    qc_status_bbt: str
    assigned_to: str | None = None


@dataclass(frozen=True)
class RowValidationError:
    """
    One field-level validation failure on a CSV row.
    """

    row_number: int
    message: str
    column: str | None = None
    value: str | None = None

    def __str__(self) -> str:
        if self.column:
            return f"{self.column}: {self.message}"
        return self.message


@dataclass(frozen=True)
class RowOutcome:
    """
    What happened to one data row.
    """

    row_number: int
    result: str
    reason: str | None = None

    @property
    def skipped(self) -> bool:
        return self.result == RowResult.SKIPPED


@dataclass(frozen=True)
class IngestionReport:
    """
    End-of-run summary for one CSV upload.
    """

    success: bool
    message: str
    inserted_count: int = 0
    skipped_count: int = 0
    row_outcomes: tuple[RowOutcome, ...] = ()
    discovered_modules: tuple[str, ...] = ()

    @property
    def errors(self) -> list[RowOutcome]:
        return [outcome for outcome in self.row_outcomes if outcome.skipped]


@dataclass
class IngestionState:
    """
    Accumulator threaded through the per-row fold of one upload.

    Appends in place so a long upload stays linear; ``to_report`` freezes it.
    """

    inserted_count: int = 0
    skipped_count: int = 0
    row_outcomes: list[RowOutcome] = field(default_factory=list)
    modules: set[str] = field(default_factory=set)

    def record(self, outcome: RowOutcome, *, module: str | None = None) -> IngestionState:
        if outcome.skipped:
            self.skipped_count += 1
        else:
            self.inserted_count += 1
        self.row_outcomes.append(outcome)
        if module:
            self.modules.add(module)
        return self

    def to_report(self) -> IngestionReport:
        return IngestionReport(
            success=True,
            message=(
                f"CSV upload completed. Inserted: {self.inserted_count}, "
                f"Skipped: {self.skipped_count}"
            ),
            inserted_count=self.inserted_count,
            skipped_count=self.skipped_count,
            row_outcomes=tuple(self.row_outcomes),
            discovered_modules=tuple(sorted(self.modules)),
        )
