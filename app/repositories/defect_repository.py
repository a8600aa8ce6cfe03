"""
app/repositories/defect_repository.py

Persistence layer for ingested defects.

Duplicate detection is a plain read followed by a separate insert. Two
uploads carrying the same natural key at the same moment can both pass the
read before either insert lands; no lock or unique constraint closes that
window.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.domain.defect_ingestion import CanonicalDefectInput
from db.models.defect import Defect


@dataclass(frozen=True)
class SourceFileSummary:
    """
    Rows persisted from one uploaded file.
    """

    name: str
    count: int
    uploaded_at: datetime | None
    uploaded_by: str | None


class DefectRepository:
    """
    Repository for single-row defect inserts and natural-key lookups.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_natural_key(
        self,
        *,
        date_reported: date | None,
        module: str | None,
        expected_result: str | None,
        actual_result: str | None,
    ) -> Defect | None:
        """
        Return one defect with the same (date, module, expected, actual), if any.

        NULL only matches NULL.
        """

        stmt = (
            select(Defect)
            .where(Defect.date_reported.is_not_distinct_from(date_reported))
            .where(Defect.module.is_not_distinct_from(module))
            .where(Defect.expected_result.is_not_distinct_from(expected_result))
            .where(Defect.actual_result.is_not_distinct_from(actual_result))
            .order_by(Defect.created_at.asc())
            .limit(1)
        )
        return self._session.execute(stmt).scalars().first()

    def insert_defect(
        self,
        record: CanonicalDefectInput,
        *,
        source_file: str | None = None,
        uploaded_by: str | None = None,
    ) -> uuid.UUID:
        """
        Stage one defect row and flush it; the caller owns the commit.
        """

        defect = Defect(
            id=uuid.uuid4(),
            date_reported=record.date_reported,
            module=record.module,
            test_case_id=record.test_case_id,
            summary=record.summary,
            expected_result=record.expected_result,
            actual_result=record.actual_result,
            severity=record.severity,
            priority=record.priority,
            status=record.status,
            date_fixed=record.date_fixed,
            qc_status_bbt=record.qc_status_bbt,
            assigned_to=record.assigned_to,
            source_file=source_file,
            uploaded_by=uploaded_by,
        )
        self._session.add(defect)
        self._session.flush()
        return defect.id

    def list_source_files(self) -> list[SourceFileSummary]:
        """
        Summarize persisted rows per uploaded file, newest upload first.
        """

        first_upload = func.min(Defect.created_at)
        stmt = (
            select(
                Defect.source_file,
                func.count(Defect.id),
                first_upload,
                func.max(Defect.uploaded_by),
            )
            .where(Defect.source_file.is_not(None))
            .group_by(Defect.source_file)
            .order_by(first_upload.desc())
        )
        return [
            SourceFileSummary(
                name=name,
                count=int(count),
                uploaded_at=uploaded_at,
                uploaded_by=uploaded_by,
            )
            for name, count, uploaded_at, uploaded_by in self._session.execute(stmt).all()
        ]

    def delete_by_source_file(self, source_file: str) -> int:
        """
        Delete every defect that came from ``source_file``; return the row count.
        """

        stmt = delete(Defect).where(Defect.source_file == source_file)
        result = self._session.execute(stmt)
        return int(result.rowcount or 0)
