"""
app/api/dependencies.py

Shared FastAPI dependencies for defect upload requests.
"""

from __future__ import annotations

from fastapi import File, HTTPException, UploadFile, status

# Spreadsheet tools disagree on the MIME type of a CSV export.
CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "text/comma-separated-values",
    "application/vnd.ms-excel",
}


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Accept the upload when either its extension or its MIME type says CSV.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").split(";", 1)[0].strip().lower()

    if not filename.endswith(".csv") and content_type not in CSV_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    return file
