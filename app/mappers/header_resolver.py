"""
app/mappers/header_resolver.py

Alias-based header resolution for defect CSV uploads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from app.domain.defect_ingestion import RawRow

CANONICAL_FIELDS: tuple[str, ...] = (
    "date_reported",
    "module",
    "test_case_id",
    "summary",
    "expected_result",
    "actual_result",
    "severity",
    "priority",
    "status",
    "date_fixed",
    "assigned_to",
)

# Fixed upload contract: every header spelling a spreadsheet may use.
DEFAULT_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "date_reported": ("Date Reported", "date reported", "dateReported", "date_reported"),
    "module": ("Fork and Module", "Module / Component", "module", "Module", "Component"),
    "test_case_id": ("Test Case ID", "test case id", "testCaseId", "test_case_id"),
    "summary": ("Summary", "Defect Summary", "summary"),
    "expected_result": ("Expected Result", "expected result", "expectedResult", "expected_result"),
    "actual_result": ("Actual Result", "actual result", "actualResult", "actual_result"),
    "severity": ("Severity", "severity"),
    "priority": ("Priority", "priority"),
    "status": ("Status", "status"),
    "date_fixed": ("Date Fixed ", "Date Fixed", "date fixed", "dateFixed", "date_fixed"),
    "assigned_to": ("Assigned To", "assigned to", "assignedTo"),
}


def normalize_header(header: str) -> str:
    """
    Normalize a column name so casing, spacing and punctuation do not matter.
    """

    return "".join(ch for ch in header.strip().lower() if ch.isalnum())


def build_raw_row(headers: Sequence[str], values: Sequence[str]) -> RawRow:
    """
    Pair one parsed data line with the header row.

    Missing trailing cells read as empty; cells past the last header are
    dropped.
    """

    return {
        header: values[index] if index < len(values) else ""
        for index, header in enumerate(headers)
    }


@dataclass(frozen=True)
class HeaderResolution:
    """
    Canonical field -> source header, for the fields the upload supplies.
    """

    canonical_to_source: dict[str, str]
    source_headers: tuple[str, ...]

    @property
    def unresolved_fields(self) -> tuple[str, ...]:
        return tuple(
            field for field in CANONICAL_FIELDS if field not in self.canonical_to_source
        )


class HeaderResolver:
    """
    Resolves raw header rows against the canonical alias table.
    """

    def __init__(
        self,
        *,
        extra_aliases: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        aliases: dict[str, tuple[str, ...]] = dict(DEFAULT_COLUMN_ALIASES)
        for canonical, values in (extra_aliases or {}).items():
            if canonical not in aliases:
                raise ValueError(f"Unknown canonical field for alias override: {canonical!r}")
            aliases[canonical] = (*aliases[canonical], *values)
        self._aliases = aliases

    def resolve(self, headers: Sequence[str]) -> HeaderResolution:
        """
        Match each canonical field to the first header hitting one of its aliases.
        """

        source_headers = tuple(headers)
        normalized_header_lookup: dict[str, str] = {}
        for header in source_headers:
            key = normalize_header(header)
            if key:
                normalized_header_lookup.setdefault(key, header)

        resolved: dict[str, str] = {}
        for canonical_field in CANONICAL_FIELDS:
            match = self._find_alias_match(
                canonical_field=canonical_field,
                normalized_header_lookup=normalized_header_lookup,
            )
            if match is not None:
                resolved[canonical_field] = match

        return HeaderResolution(
            canonical_to_source=resolved,
            source_headers=source_headers,
        )

    @staticmethod
    def extract(
        raw_row: Mapping[str, str],
        canonical_field: str,
        resolution: HeaderResolution,
    ) -> str:
        """
        Return the cell for ``canonical_field`` or an empty string.
        """

        source_column = resolution.canonical_to_source.get(canonical_field)
        if source_column is None:
            return ""
        return raw_row.get(source_column) or ""

    def _find_alias_match(
        self,
        *,
        canonical_field: str,
        normalized_header_lookup: Mapping[str, str],
    ) -> str | None:
        for alias in self._aliases.get(canonical_field, ()):
            match = normalized_header_lookup.get(normalize_header(alias))
            if match is not None:
                return match
        return None
