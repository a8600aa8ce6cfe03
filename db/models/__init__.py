"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.defect import (
    QC_STATUS_VALUES,
    SEVERITY_VALUES,
    STATUS_VALUES,
    Defect,
    DefectStatus,
    QCStatusBBT,
    Severity,
)

__all__ = [
    "Defect",
    "DefectStatus",
    "QCStatusBBT",
    "QC_STATUS_VALUES",
    "SEVERITY_VALUES",
    "STATUS_VALUES",
    "Severity",
]
