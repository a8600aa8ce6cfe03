"""
Ingest a defect CSV file from the command line.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from app.config import get_app_settings, get_csv_ingestion_settings
from app.schemas.csv_ingestion import CSVUploadResponse
from app.services.csv_ingestion_service import get_csv_ingestion_service
from db.session import SessionLocal


def main() -> int:
    parser = argparse.ArgumentParser(description="Upload a defect CSV export into the database.")
    parser.add_argument("path", type=Path, help="Path to the CSV file.")
    parser.add_argument(
        "--uploaded-by",
        dest="uploaded_by",
        default=None,
        help="Optional uploader label stored on every inserted row.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, get_app_settings().log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    content = args.path.read_text(encoding="utf-8-sig")
    service = get_csv_ingestion_service()
    with SessionLocal() as db:
        report = service.ingest_csv(
            content=content,
            db=db,
            source_file=args.path.name,
            uploaded_by=args.uploaded_by,
        )

    response = CSVUploadResponse.from_report(
        report,
        max_errors=get_csv_ingestion_settings().max_reported_errors,
    )
    print(json.dumps(response.model_dump(by_alias=True), indent=2))
    return 0 if report.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
