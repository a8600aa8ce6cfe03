"""
app/schemas/csv_ingestion.py

Response schemas for defect CSV upload endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.defect_ingestion import IngestionReport


class CSVRowErrorResponse(BaseModel):
    """
    One skipped row and why it was skipped.
    """

    row: int = Field(..., ge=1)
    reason: str


class CSVUploadResponse(BaseModel):
    """
    API response model for one defect CSV upload.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    inserted: int = Field(..., ge=0)
    skipped: int = Field(..., ge=0)
    errors: list[CSVRowErrorResponse] = Field(default_factory=list)
    discovered_modules: list[str] = Field(default_factory=list, alias="discoveredModules")

    @classmethod
    def from_report(cls, report: IngestionReport, *, max_errors: int) -> CSVUploadResponse:
        return cls(
            success=report.success,
            message=report.message,
            inserted=report.inserted_count,
            skipped=report.skipped_count,
            errors=[
                CSVRowErrorResponse(row=outcome.row_number, reason=outcome.reason or "")
                for outcome in report.errors[: max(0, max_errors)]
            ],
            discovered_modules=list(report.discovered_modules),
        )


class UploadedFileResponse(BaseModel):
    """
    Persisted rows grouped by the file they were uploaded from.
    """

    name: str
    count: int = Field(..., ge=0)
    uploaded_at: datetime | None = None
    uploaded_by: str = "Unknown"


class DeleteUploadResponse(BaseModel):
    success: bool
    message: str
    deleted: int = Field(..., ge=0)
