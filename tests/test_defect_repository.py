from __future__ import annotations

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.domain.defect_ingestion import CanonicalDefectInput
from app.repositories.defect_repository import DefectRepository
from db.models.defect import Defect


def _record(**overrides: object) -> CanonicalDefectInput:
    values: dict[str, object] = {
        "date_reported": date(2026, 1, 9),
        "module": "KFQ-Discover",
        "test_case_id": "ST-02",
        "summary": None,
        "expected_result": "Freemium Sifu guide opens",
        "actual_result": "Blank screen",
        "severity": "HIGH",
        "priority": "High",
        "status": "OPEN",
        "date_fixed": None,
        "qc_status_bbt": "PENDING",
    }
    values.update(overrides)
    return CanonicalDefectInput(**values)  # type: ignore[arg-type]


def test_insert_then_find_by_natural_key(db_session: Session) -> None:
    repository = DefectRepository(db_session)

    defect_id = repository.insert_defect(_record(), source_file="sheet.csv", uploaded_by="qa@example.com")
    db_session.commit()

    found = repository.find_by_natural_key(
        date_reported=date(2026, 1, 9),
        module="KFQ-Discover",
        expected_result="Freemium Sifu guide opens",
        actual_result="Blank screen",
    )
    assert found is not None
    assert found.id == defect_id
    assert found.test_case_id == "ST-02"
    assert found.source_file == "sheet.csv"
    assert found.uploaded_by == "qa@example.com"
    assert found.created_at is not None


def test_natural_key_ignores_other_fields(db_session: Session) -> None:
    repository = DefectRepository(db_session)
    repository.insert_defect(_record(severity="LOW", status="CLOSED", test_case_id=None))
    db_session.commit()

    found = repository.find_by_natural_key(
        date_reported=date(2026, 1, 9),
        module="KFQ-Discover",
        expected_result="Freemium Sifu guide opens",
        actual_result="Blank screen",
    )

    assert found is not None
    assert found.test_case_id is None


def test_any_differing_key_field_is_not_a_match(db_session: Session) -> None:
    repository = DefectRepository(db_session)
    repository.insert_defect(_record())
    db_session.commit()

    key = {
        "date_reported": date(2026, 1, 9),
        "module": "KFQ-Discover",
        "expected_result": "Freemium Sifu guide opens",
        "actual_result": "Blank screen",
    }
    for field, other in (
        ("date_reported", date(2026, 1, 10)),
        ("module", "KFQ-Discover "),
        ("expected_result", "Guide opens"),
        ("actual_result", "blank screen"),
    ):
        assert repository.find_by_natural_key(**{**key, field: other}) is None


def test_missing_date_is_not_a_wildcard(db_session: Session) -> None:
    repository = DefectRepository(db_session)
    repository.insert_defect(_record())
    db_session.commit()

    assert (
        repository.find_by_natural_key(
            date_reported=None,
            module="KFQ-Discover",
            expected_result="Freemium Sifu guide opens",
            actual_result="Blank screen",
        )
        is None
    )


def test_source_file_summary_and_purge(db_session: Session) -> None:
    repository = DefectRepository(db_session)
    repository.insert_defect(_record(), source_file="a.csv", uploaded_by="ana")
    repository.insert_defect(_record(actual_result="Crash"), source_file="a.csv", uploaded_by="ana")
    repository.insert_defect(_record(actual_result="Spinner"), source_file="b.csv")
    repository.insert_defect(_record(actual_result="Manual"))
    db_session.commit()

    summaries = {summary.name: summary for summary in repository.list_source_files()}
    assert set(summaries) == {"a.csv", "b.csv"}
    assert summaries["a.csv"].count == 2
    assert summaries["a.csv"].uploaded_by == "ana"
    assert summaries["b.csv"].uploaded_by is None

    deleted = repository.delete_by_source_file("a.csv")
    db_session.commit()

    assert deleted == 2
    remaining = db_session.execute(select(func.count()).select_from(Defect)).scalar_one()
    assert remaining == 2
