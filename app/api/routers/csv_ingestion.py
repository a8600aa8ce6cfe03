"""
app/api/routers/csv_ingestion.py

Defect CSV upload HTTP endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_csv_upload
from app.config import CSVIngestionSettings, get_csv_ingestion_settings
from app.schemas.csv_ingestion import CSVUploadResponse
from app.services.csv_ingestion_service import (
    DefectCSVIngestionService,
    get_csv_ingestion_service,
)
from db.session import get_db

router = APIRouter(tags=["ingestion"])


@router.post("/upload-csv", response_model=CSVUploadResponse)
def upload_csv(
    file: UploadFile = Depends(get_csv_upload),
    uploaded_by: str | None = Query(default=None, description="Optional uploader label stored on each row"),
    db: Session = Depends(get_db),
    ingestion_service: DefectCSVIngestionService = Depends(get_csv_ingestion_service),
    settings: CSVIngestionSettings = Depends(get_csv_ingestion_settings),
) -> CSVUploadResponse:
    """
    Ingest one defect CSV export.
    """

    try:
        content = file.file.read().decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CSV must be UTF-8 encoded.",
        ) from exc
    finally:
        file.file.close()

    report = ingestion_service.ingest_csv(
        content=content,
        db=db,
        source_file=(file.filename or "").strip() or None,
        uploaded_by=uploaded_by.strip() if uploaded_by and uploaded_by.strip() else None,
    )
    response = CSVUploadResponse.from_report(report, max_errors=settings.max_reported_errors)
    if not report.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=response.model_dump(by_alias=True),
        )
    return response
