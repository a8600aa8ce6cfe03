"""
db/models/defect.py

Persisted QA defect record produced by CSV ingestion.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import CheckConstraint, Date, DateTime, Index, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class Severity:
    MAJOR = "MAJOR"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class DefectStatus:
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"
    ON_HOLD = "ON_HOLD"
    AS_IT_IS = "AS_IT_IS"


class QCStatusBBT:
    PASSED = "PASSED"
    FAILED = "FAILED"
    PENDING = "PENDING"
    REJECTED = "REJECTED"


SEVERITY_VALUES: tuple[str, ...] = (
    Severity.MAJOR,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
)

STATUS_VALUES: tuple[str, ...] = (
    DefectStatus.OPEN,
    DefectStatus.IN_PROGRESS,
    DefectStatus.CLOSED,
    DefectStatus.ON_HOLD,
    DefectStatus.AS_IT_IS,
)

QC_STATUS_VALUES: tuple[str, ...] = (
    QCStatusBBT.PASSED,
    QCStatusBBT.FAILED,
    QCStatusBBT.PENDING,
    QCStatusBBT.REJECTED,
)


class Defect(Base):
    __tablename__ = "defects"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    date_reported: Mapped[date] = mapped_column(Date, nullable=False)
    module: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Fork / module / component label, stored verbatim",
    )
    test_case_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    expected_result: Mapped[str] = mapped_column(Text, nullable=False)
    actual_result: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="MAJOR, HIGH, MEDIUM, LOW",
    )
    priority: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="OPEN, IN_PROGRESS, CLOSED, ON_HOLD, AS_IT_IS",
    )
    date_fixed: Mapped[date | None] = mapped_column(Date, nullable=True)
    qc_status_bbt: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=QCStatusBBT.PENDING,
    )
    assigned_to: Mapped[str | None] = mapped_column(String(100), nullable=True)
    source_file: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Name of the uploaded CSV file that produced this row",
    )
    uploaded_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    __table_args__ = (
        CheckConstraint(
            "severity IN ('MAJOR', 'HIGH', 'MEDIUM', 'LOW')",
            name="ck_defects_severity",
        ),
        CheckConstraint(
            "status IN ('OPEN', 'IN_PROGRESS', 'CLOSED', 'ON_HOLD', 'AS_IT_IS')",
            name="ck_defects_status",
        ),
        CheckConstraint(
            "qc_status_bbt IN ('PASSED', 'FAILED', 'PENDING', 'REJECTED')",
            name="ck_defects_qc_status_bbt",
        ),
        Index("ix_defects_date_reported", "date_reported"),
        Index("ix_defects_module", "module"),
        Index("ix_defects_severity", "severity"),
        Index("ix_defects_status", "status"),
        Index("ix_defects_source_file", "source_file"),
        Index("ix_defects_natural_key", "date_reported", "module"),
    )
