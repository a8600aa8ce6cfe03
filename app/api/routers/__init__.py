"""
app/api/routers package marker.
"""

from app.api.routers.csv_ingestion import router as csv_ingestion_router
from app.api.routers.uploads import router as uploads_router

__all__ = [
    "csv_ingestion_router",
    "uploads_router",
]
