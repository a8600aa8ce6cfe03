"""
app/services package marker.
"""

from app.services.csv_ingestion_service import (
    CSVPersistenceError,
    DefectCSVIngestionService,
    get_csv_ingestion_service,
)

__all__ = [
    "CSVPersistenceError",
    "DefectCSVIngestionService",
    "get_csv_ingestion_service",
]
