"""
app/normalizers package marker.
"""

from app.normalizers.field_normalizer import (
    FieldNormalizer,
    normalize_assigned_to,
    normalize_severity,
    normalize_status,
    parse_csv_date,
)

__all__ = [
    "FieldNormalizer",
    "normalize_assigned_to",
    "normalize_severity",
    "normalize_status",
    "parse_csv_date",
]
