"""
app/normalizers/field_normalizer.py

Coercion of free-text CSV cells into typed defect fields.

Severity and status are classified by ordered predicate chains. Each chain
is evaluated top to bottom and the first match wins, so the order of the
entries is part of the behaviour: "fixed on hold" is CLOSED, not ON_HOLD.
Text that matches nothing falls back to an exact enum match, then to the
field default. Unrecognised values never fail a row.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Callable, Mapping, Sequence

from app.domain.defect_ingestion import NormalizedDefectRow
from app.mappers.header_resolver import HeaderResolution, HeaderResolver
from db.models.defect import (
    SEVERITY_VALUES,
    STATUS_VALUES,
    DefectStatus,
    QCStatusBBT,
    Severity,
)

logger = logging.getLogger(__name__)

DEFAULT_MODULE = "Unknown"
DEFAULT_RESULT_TEXT = "N/A"
DEFAULT_PRIORITY = "Medium"
DEFAULT_SEVERITY = Severity.MEDIUM
DEFAULT_STATUS = DefectStatus.OPEN

_ISO_DATE = re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})$")
_US_SLASH_DATE = re.compile(r"^([0-9]{1,2})/([0-9]{1,2})/([0-9]{4})$")
_DAY_FIRST_DASH_DATE = re.compile(r"^([0-9]{1,2})-([0-9]{1,2})-([0-9]{4})$")

Predicate = Callable[[str], bool]


def _contains(*needles: str) -> Predicate:
    return lambda text: any(needle in text for needle in needles)


def _equals(expected: str) -> Predicate:
    return lambda text: text == expected


SEVERITY_RULES: tuple[tuple[Predicate, str], ...] = (
    (_contains("major", "critical"), Severity.MAJOR),
    (_equals("high"), Severity.HIGH),
    (_equals("medium"), Severity.MEDIUM),
    (_equals("low"), Severity.LOW),
)

STATUS_RULES: tuple[tuple[Predicate, str], ...] = (
    (_contains("fix", "closed"), DefectStatus.CLOSED),
    (_contains("progress"), DefectStatus.IN_PROGRESS),
    (_equals("as it is"), DefectStatus.AS_IT_IS),
    (_contains("hold", "pending"), DefectStatus.ON_HOLD),
)


def parse_csv_date(value: str | None) -> date | None:
    """
    Parse ``YYYY-MM-DD``, ``M/D/YYYY`` or ``D-M-YYYY`` into a date.

    Returns None for any other shape and for impossible calendar dates
    such as 2024-02-30.
    """

    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    match = _ISO_DATE.match(text)
    if match:
        year, month, day = match.groups()
    else:
        match = _US_SLASH_DATE.match(text)
        if match:
            month, day, year = match.groups()
        else:
            match = _DAY_FIRST_DASH_DATE.match(text)
            if not match:
                return None
            day, month, year = match.groups()

    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def match_enum_value(value: str, allowed: Sequence[str]) -> str | None:
    """
    Case-insensitive exact match of ``value`` against ``allowed``.
    """

    normalized = value.strip().upper()
    for candidate in allowed:
        if candidate.upper() == normalized:
            return candidate
    return None


def classify(
    value: str | None,
    *,
    rules: Sequence[tuple[Predicate, str]],
    allowed: Sequence[str],
    default: str,
) -> str:
    """
    Run an ordered predicate chain, then exact match, then default.
    """

    if not value or not value.strip():
        return default

    text = value.strip().lower()
    for predicate, result in rules:
        if predicate(text):
            return result
    return match_enum_value(value, allowed) or default


def normalize_severity(value: str | None) -> str:
    return classify(
        value,
        rules=SEVERITY_RULES,
        allowed=SEVERITY_VALUES,
        default=DEFAULT_SEVERITY,
    )


def normalize_status(value: str | None) -> str:
    return classify(
        value,
        rules=STATUS_RULES,
        allowed=STATUS_VALUES,
        default=DEFAULT_STATUS,
    )


def normalize_assigned_to(value: str | None) -> str | None:
    """
    Collapse team labels like "frontend team" / "dev squad" to one spelling.
    """

    if not value or not value.strip():
        return None
    trimmed = value.strip()
    lowered = trimmed.lower()
    if "front" in lowered:
        return "Frontend"
    if "dev" in lowered:
        return "Devs"
    return trimmed


def _optional_text(value: str) -> str | None:
    stripped = value.strip()
    return stripped or None


class FieldNormalizer:
    """
    Turns one raw CSV row into normalized defect field values.
    """

    def __init__(self, resolver: HeaderResolver | None = None) -> None:
        self._resolver = resolver or HeaderResolver()

    def normalize(
        self,
        raw_row: Mapping[str, str],
        resolution: HeaderResolution,
    ) -> NormalizedDefectRow:
        def cell(canonical_field: str) -> str:
            return self._resolver.extract(raw_row, canonical_field, resolution).strip()

        raw_date_reported = cell("date_reported")
        raw_date_fixed = cell("date_fixed")
        date_fixed = parse_csv_date(raw_date_fixed)
        if raw_date_fixed and date_fixed is None:
            logger.debug("Ignoring unparseable date_fixed value=%r", raw_date_fixed)

        return NormalizedDefectRow(
            date_reported=parse_csv_date(raw_date_reported),
            raw_date_reported=raw_date_reported,
            module=cell("module") or DEFAULT_MODULE,
            test_case_id=_optional_text(cell("test_case_id")),
            summary=_optional_text(cell("summary")),
            expected_result=cell("expected_result") or DEFAULT_RESULT_TEXT,
            actual_result=cell("actual_result") or DEFAULT_RESULT_TEXT,
            severity=normalize_severity(cell("severity")),
            priority=cell("priority") or DEFAULT_PRIORITY,
            status=normalize_status(cell("status")),
            date_fixed=date_fixed,
            qc_status_bbt=QCStatusBBT.PENDING,
            assigned_to=normalize_assigned_to(cell("assigned_to")),
        )
