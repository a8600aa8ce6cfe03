"""
app/validators/defect_validator.py

Structural validation of normalized defect rows.
"""

from __future__ import annotations

from typing import Sequence

from app.domain.defect_ingestion import (
    CanonicalDefectInput,
    NormalizedDefectRow,
    RowValidationError,
)
from db.models.defect import QC_STATUS_VALUES, SEVERITY_VALUES, STATUS_VALUES

REASON_SEPARATOR = "; "


def format_reason(errors: Sequence[RowValidationError]) -> str:
    """
    Collapse a row's errors into one ``"field: message; ..."`` string.
    """

    return REASON_SEPARATOR.join(str(error) for error in errors)


class DefectRecordValidator:
    """
    Validates normalized rows and builds canonical defect inputs.
    """

    def validate(
        self,
        *,
        normalized: NormalizedDefectRow,
        row_number: int,
    ) -> tuple[CanonicalDefectInput | None, list[RowValidationError]]:
        """
        Collect every violation on the row; return a record only when there are none.
        """

        errors: list[RowValidationError] = []

        if normalized.date_reported is None:
            raw = normalized.raw_date_reported
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column="date_reported",
                    message=(
                        f"Invalid or unparseable date '{raw}'."
                        if raw
                        else "Missing date reported."
                    ),
                    value=raw or None,
                )
            )

        for column in ("module", "expected_result", "actual_result"):
            self._require_text(
                value=getattr(normalized, column),
                column=column,
                row_number=row_number,
                errors=errors,
            )

        self._require_member(
            value=normalized.severity,
            allowed=SEVERITY_VALUES,
            column="severity",
            row_number=row_number,
            errors=errors,
        )
        self._require_member(
            value=normalized.status,
            allowed=STATUS_VALUES,
            column="status",
            row_number=row_number,
            errors=errors,
        )
        self._require_member(
            value=normalized.qc_status_bbt,
            allowed=QC_STATUS_VALUES,
            column="qc_status_bbt",
            row_number=row_number,
            errors=errors,
        )

        if errors or normalized.date_reported is None:
            return None, errors

        return (
            CanonicalDefectInput(
                date_reported=normalized.date_reported,
                module=normalized.module,
                test_case_id=normalized.test_case_id,
                summary=normalized.summary,
                expected_result=normalized.expected_result,
                actual_result=normalized.actual_result,
                severity=normalized.severity,
                priority=normalized.priority,
                status=normalized.status,
                date_fixed=normalized.date_fixed,
                qc_status_bbt=normalized.qc_status_bbt,
                assigned_to=normalized.assigned_to,
            ),
            [],
        )

    @staticmethod
    def _require_text(
        *,
        value: str | None,
        column: str,
        row_number: int,
        errors: list[RowValidationError],
    ) -> None:
        if value is None or not value.strip():
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column=column,
                    message="Required value is missing.",
                    value=value,
                )
            )

    @staticmethod
    def _require_member(
        *,
        value: str,
        allowed: Sequence[str],
        column: str,
        row_number: int,
        errors: list[RowValidationError],
    ) -> None:
        if value not in allowed:
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column=column,
                    message=f"Unsupported {column}. Allowed values: {', '.join(allowed)}.",
                    value=value,
                )
            )
