"""
app/domain package marker.
"""

from app.domain.defect_ingestion import (
    CanonicalDefectInput,
    IngestionReport,
    IngestionState,
    NormalizedDefectRow,
    RawRow,
    RowOutcome,
    RowResult,
    RowValidationError,
)

__all__ = [
    "CanonicalDefectInput",
    "IngestionReport",
    "IngestionState",
    "NormalizedDefectRow",
    "RawRow",
    "RowOutcome",
    "RowResult",
    "RowValidationError",
]
