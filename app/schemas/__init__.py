"""
app/schemas package marker.
"""

from app.schemas.csv_ingestion import (
    CSVRowErrorResponse,
    CSVUploadResponse,
    DeleteUploadResponse,
    UploadedFileResponse,
)

__all__ = [
    "CSVRowErrorResponse",
    "CSVUploadResponse",
    "DeleteUploadResponse",
    "UploadedFileResponse",
]
