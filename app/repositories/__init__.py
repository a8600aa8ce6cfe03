"""
app/repositories package marker.
"""

from app.repositories.defect_repository import DefectRepository, SourceFileSummary

__all__ = [
    "DefectRepository",
    "SourceFileSummary",
]
