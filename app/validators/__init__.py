"""
app/validators package marker.
"""

from app.validators.defect_validator import DefectRecordValidator, format_reason

__all__ = [
    "DefectRecordValidator",
    "format_reason",
]
