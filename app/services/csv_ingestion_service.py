"""
app/services/csv_ingestion_service.py

Service layer for defect CSV ingestion.

One upload runs as a strict in-order fold over the parsed rows:

    ParsingFile -> IteratingRows
        -> Normalizing -> Validating -> DuplicateCheck -> Persisting -> NextRow
        (any stage failing -> RecordSkip(reason) -> NextRow)
    -> ReportReady

Each accepted row is committed on its own so later rows see it during their
duplicate check. A failed row never rolls back earlier rows. Only a
whole-file problem (unparseable text, fewer than two rows, or a lost
database connection) turns the run into a failure report; in the last case
rows committed before the fault stay in the database even though the report
credits zero insertions.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Callable, Sequence

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_csv_ingestion_settings
from app.domain.defect_ingestion import (
    IngestionReport,
    IngestionState,
    RowOutcome,
    RowResult,
)
from app.mappers.header_resolver import HeaderResolution, HeaderResolver, build_raw_row
from app.normalizers.field_normalizer import FieldNormalizer
from app.parsers.csv_parser import CSVParseError, parse_csv_content
from app.repositories.defect_repository import DefectRepository
from app.validators.defect_validator import DefectRecordValidator, format_reason

logger = logging.getLogger(__name__)

EMPTY_FILE_MESSAGE = "CSV file is empty or contains only headers"
UNKNOWN_IDENTIFIER = "Unknown"


class CSVPersistenceError(RuntimeError):
    """
    Raised when the database becomes unusable in the middle of an upload.
    """


class DefectCSVIngestionService:
    """
    Coordinates parsing, header resolution, normalization, validation,
    duplicate detection and persistence for one defect CSV upload.
    """

    def __init__(
        self,
        *,
        log_skipped_rows: bool = True,
        resolver: HeaderResolver | None = None,
        normalizer: FieldNormalizer | None = None,
        validator: DefectRecordValidator | None = None,
        repository_factory: Callable[[Session], DefectRepository] = DefectRepository,
    ) -> None:
        self._log_skipped_rows = log_skipped_rows
        self._resolver = resolver or HeaderResolver()
        self._normalizer = normalizer or FieldNormalizer(self._resolver)
        self._validator = validator or DefectRecordValidator()
        self._repository_factory = repository_factory

    def ingest_csv(
        self,
        *,
        content: str,
        db: Session,
        source_file: str | None = None,
        uploaded_by: str | None = None,
    ) -> IngestionReport:
        """
        Ingest one CSV upload and return its report.

        Args:
            content:      Full file text.
            db:           Active SQLAlchemy session (caller owns lifecycle).
            source_file:  Upload name stored on every inserted row.
            uploaded_by:  Uploader label stored on every inserted row.
        """

        try:
            rows = parse_csv_content(content)
        except CSVParseError as exc:
            logger.warning("CSV upload rejected source_file=%r: %s", source_file, exc)
            return _failure_report(f"Failed to process CSV: {exc}")

        if len(rows) < 2:
            logger.warning(
                "CSV upload rejected source_file=%r: %d parsed row(s)",
                source_file,
                len(rows),
            )
            return _failure_report(EMPTY_FILE_MESSAGE)

        headers = rows[0]
        resolution = self._resolver.resolve(headers)
        if resolution.unresolved_fields:
            logger.info(
                "CSV upload source_file=%r has no column for: %s",
                source_file,
                ", ".join(resolution.unresolved_fields),
            )

        repository = self._repository_factory(db)
        state = IngestionState()
        try:
            for row_number, values in enumerate(rows[1:], start=2):
                state = self._process_row(
                    state,
                    row_number=row_number,
                    headers=headers,
                    values=values,
                    resolution=resolution,
                    repository=repository,
                    db=db,
                    source_file=source_file,
                    uploaded_by=uploaded_by,
                )
        except CSVPersistenceError as exc:
            logger.exception(
                "CSV upload aborted source_file=%r after %d committed row(s)",
                source_file,
                state.inserted_count,
            )
            return _failure_report(f"Failed to process CSV: {exc}")

        logger.info(
            "CSV upload completed source_file=%r inserted=%d skipped=%d modules=%d",
            source_file,
            state.inserted_count,
            state.skipped_count,
            len(state.modules),
        )
        return state.to_report()

    # ------------------------------------------------------------------
    # Per-row fold step
    # ------------------------------------------------------------------

    def _process_row(
        self,
        state: IngestionState,
        *,
        row_number: int,
        headers: Sequence[str],
        values: Sequence[str],
        resolution: HeaderResolution,
        repository: DefectRepository,
        db: Session,
        source_file: str | None,
        uploaded_by: str | None,
    ) -> IngestionState:
        raw_row = build_raw_row(headers, values)
        module = self._resolver.extract(raw_row, "module", resolution).strip() or None

        normalized = self._normalizer.normalize(raw_row, resolution)
        record, errors = self._validator.validate(
            normalized=normalized,
            row_number=row_number,
        )
        if record is None:
            return self._skip(state, row_number, format_reason(errors), module=module)

        try:
            existing = repository.find_by_natural_key(
                date_reported=record.date_reported,
                module=record.module,
                expected_result=record.expected_result,
                actual_result=record.actual_result,
            )
            if existing is not None:
                identifier = existing.test_case_id or UNKNOWN_IDENTIFIER
                return self._skip(
                    state,
                    row_number,
                    f"Duplicate of existing defect (Test Case ID: {identifier})",
                    module=module,
                )

            repository.insert_defect(
                record,
                source_file=source_file,
                uploaded_by=uploaded_by,
            )
            db.commit()
        except SQLAlchemyError as exc:
            self._rollback(db)
            if isinstance(exc, DBAPIError) and exc.connection_invalidated:
                raise CSVPersistenceError("Database connection lost during upload.") from exc
            return self._skip(
                state,
                row_number,
                f"Failed to persist row: {_describe_db_error(exc)}",
                module=module,
            )

        return state.record(
            RowOutcome(row_number=row_number, result=RowResult.INSERTED),
            module=module,
        )

    def _skip(
        self,
        state: IngestionState,
        row_number: int,
        reason: str,
        *,
        module: str | None,
    ) -> IngestionState:
        if self._log_skipped_rows:
            logger.warning("CSV row skipped row=%s reason=%s", row_number, reason)
        return state.record(
            RowOutcome(row_number=row_number, result=RowResult.SKIPPED, reason=reason),
            module=module,
        )

    @staticmethod
    def _rollback(db: Session) -> None:
        try:
            db.rollback()
        except SQLAlchemyError as exc:
            raise CSVPersistenceError("Database session could not be rolled back.") from exc


def _failure_report(message: str) -> IngestionReport:
    return IngestionReport(success=False, message=message)


def _describe_db_error(exc: SQLAlchemyError) -> str:
    original = getattr(exc, "orig", None)
    return str(original if original is not None else exc)


@lru_cache(maxsize=1)
def get_csv_ingestion_service() -> DefectCSVIngestionService:
    """
    Build and cache the ingestion service with env-driven settings.
    """

    settings = get_csv_ingestion_settings()
    return DefectCSVIngestionService(log_skipped_rows=settings.log_skipped_rows)
