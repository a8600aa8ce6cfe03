"""
app/api/routers/uploads.py

Per-file views over ingested defects.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.repositories.defect_repository import DefectRepository
from app.schemas.csv_ingestion import DeleteUploadResponse, UploadedFileResponse
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["uploads"])


@router.get("/uploads", response_model=list[UploadedFileResponse])
def list_uploads(db: Session = Depends(get_db)) -> list[UploadedFileResponse]:
    """
    List uploaded files with their persisted row counts.
    """

    return [
        UploadedFileResponse(
            name=summary.name,
            count=summary.count,
            uploaded_at=summary.uploaded_at,
            uploaded_by=summary.uploaded_by or "Unknown",
        )
        for summary in DefectRepository(db).list_source_files()
    ]


@router.delete("/uploads/{source_file:path}", response_model=DeleteUploadResponse)
def delete_upload(source_file: str, db: Session = Depends(get_db)) -> DeleteUploadResponse:
    """
    Remove every defect that was ingested from one file.
    """

    name = source_file.strip()
    if not name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File name is required.",
        )

    try:
        deleted = DefectRepository(db).delete_by_source_file(name)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to delete defects for source_file=%r", name)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete file data.",
        ) from exc

    return DeleteUploadResponse(
        success=True,
        message=f"Deleted {deleted} defect(s) from {name}",
        deleted=deleted,
    )
