"""
tests/test_field_normalizer.py

Unit tests for date parsing, enum classification and row normalization.

Coverage
--------
- Accepted date shapes and calendar validation
- Severity predicate chain, exact-match fallback and default
- Status predicate chain order on ambiguous text
- Team label collapsing for assigned_to
- Row-level defaults (module, results, priority, QC status)
"""

from __future__ import annotations

from datetime import date

import pytest

from app.mappers.header_resolver import HeaderResolver, build_raw_row
from app.normalizers.field_normalizer import (
    FieldNormalizer,
    normalize_assigned_to,
    normalize_severity,
    normalize_status,
    parse_csv_date,
)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


class TestParseCSVDate:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("2024-01-15", date(2024, 1, 15)),
            ("1/5/2024", date(2024, 1, 5)),
            ("12/31/2023", date(2023, 12, 31)),
            ("5-1-2024", date(2024, 1, 5)),
            ("31-12-2023", date(2023, 12, 31)),
            ("  2024-02-29  ", date(2024, 2, 29)),
        ],
    )
    def test_accepted_shapes(self, raw: str, expected: date) -> None:
        assert parse_csv_date(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "13/45/2024",
            "2024-02-30",
            "2023-02-29",
            "2024-13-01",
            "32-01-2024",
            "2024/01/15",
            "Jan 5, 2024",
            "2024-1-5",
            "\uff12\uff10\uff12\uff14-\uff10\uff11-\uff10\uff15",
            "\u0661\u0662/\u0663\u0661/\u0662\u0660\u0662\u0663",
            "\u0665-\u0661-\u0662\u0660\u0662\u0664",
            "",
            "   ",
            None,
        ],
    )
    def test_rejected_values(self, raw: str | None) -> None:
        assert parse_csv_date(raw) is None


# ---------------------------------------------------------------------------
# Severity
# ---------------------------------------------------------------------------


class TestNormalizeSeverity:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Major", "MAJOR"),
            ("critical", "MAJOR"),
            ("Critical issue!!", "MAJOR"),
            (" HIGH ", "HIGH"),
            ("medium", "MEDIUM"),
            ("Low", "LOW"),
        ],
    )
    def test_keyword_chain(self, raw: str, expected: str) -> None:
        assert normalize_severity(raw) == expected

    def test_unrecognised_text_defaults_to_medium(self) -> None:
        assert normalize_severity("cosmetic") == "MEDIUM"
        assert normalize_severity("") == "MEDIUM"
        assert normalize_severity(None) == "MEDIUM"

    def test_first_matching_rule_wins(self) -> None:
        assert normalize_severity("critical but low impact") == "MAJOR"

    @pytest.mark.parametrize("raw", ["Slow response", "Follow-up", "Medium-High", "highest"])
    def test_only_major_and_critical_match_inside_free_text(self, raw: str) -> None:
        assert normalize_severity(raw) == "MEDIUM"


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


class TestNormalizeStatus:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Fixed", "CLOSED"),
            ("closed", "CLOSED"),
            ("In Progress", "IN_PROGRESS"),
            ("as it is", "AS_IT_IS"),
            ("  As It Is ", "AS_IT_IS"),
            ("On hold", "ON_HOLD"),
            ("Pending review", "ON_HOLD"),
            ("open", "OPEN"),
            ("in_progress", "IN_PROGRESS"),
            ("on_hold", "ON_HOLD"),
        ],
    )
    def test_predicate_chain(self, raw: str, expected: str) -> None:
        assert normalize_status(raw) == expected

    def test_chain_order_on_ambiguous_text(self) -> None:
        assert normalize_status("fix in progress") == "CLOSED"
        assert normalize_status("progress on hold") == "IN_PROGRESS"

    def test_as_it_is_requires_exact_text(self) -> None:
        assert normalize_status("keep as it is") == "OPEN"

    def test_missing_or_unknown_status_is_open(self) -> None:
        assert normalize_status("") == "OPEN"
        assert normalize_status(None) == "OPEN"
        assert normalize_status("needs triage") == "OPEN"


# ---------------------------------------------------------------------------
# Assigned to
# ---------------------------------------------------------------------------


class TestNormalizeAssignedTo:
    def test_team_labels_collapse(self) -> None:
        assert normalize_assigned_to("front-end team") == "Frontend"
        assert normalize_assigned_to("Dev squad") == "Devs"

    def test_other_values_are_trimmed(self) -> None:
        assert normalize_assigned_to("  QA Lead ") == "QA Lead"
        assert normalize_assigned_to("   ") is None


# ---------------------------------------------------------------------------
# Row normalization
# ---------------------------------------------------------------------------


class TestFieldNormalizer:
    def _normalize(self, headers: list[str], values: list[str]):
        resolver = HeaderResolver()
        resolution = resolver.resolve(headers)
        return FieldNormalizer(resolver).normalize(build_raw_row(headers, values), resolution)

    def test_defaults_fill_missing_columns(self) -> None:
        row = self._normalize(["Date Reported"], ["2024-03-01"])

        assert row.date_reported == date(2024, 3, 1)
        assert row.module == "Unknown"
        assert row.expected_result == "N/A"
        assert row.actual_result == "N/A"
        assert row.priority == "Medium"
        assert row.severity == "MEDIUM"
        assert row.status == "OPEN"
        assert row.qc_status_bbt == "PENDING"
        assert row.test_case_id is None
        assert row.summary is None
        assert row.date_fixed is None

    def test_values_are_coerced(self) -> None:
        headers = [
            "Date Reported",
            "Fork and Module",
            "Test Case ID",
            "Expected Result",
            "Actual Result",
            "Severity",
            "Priority",
            "Status",
            "Date Fixed ",
            "QC Status by BBT",
        ]
        values = [
            "1/9/2026",
            "HSA-Mock Exam (v2)",
            "ST-02",
            "Timer starts",
            "Timer frozen",
            "critical",
            "P1",
            "Fixed",
            "12-1-2026",
            "TRUE",
        ]

        row = self._normalize(headers, values)

        assert row.date_reported == date(2026, 1, 9)
        assert row.module == "HSA-Mock Exam (v2)"
        assert row.test_case_id == "ST-02"
        assert row.severity == "MAJOR"
        assert row.priority == "P1"
        assert row.status == "CLOSED"
        assert row.date_fixed == date(2026, 1, 12)
        assert row.qc_status_bbt == "PENDING"

    def test_bad_date_keeps_raw_text_and_bad_date_fixed_is_dropped(self) -> None:
        row = self._normalize(["Date Reported", "Date Fixed"], ["13/45/2024", "soon"])

        assert row.date_reported is None
        assert row.raw_date_reported == "13/45/2024"
        assert row.date_fixed is None
