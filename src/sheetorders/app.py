"""Application orchestration entry points."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from sheetorders.adapters.sheets import translate_rows
from sheetorders.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyOrderUnitOfWork,
    is_started,
    startup,
)
from sheetorders.common.logging import configure_logging
from sheetorders.config.ingest import get_ingest_settings
from sheetorders.domain.data_integration import SyncRowsResult, sync_rows, validate_rows
from sheetorders.domain.dates import utcnow
from sheetorders.domain.duplicates import DuplicateDetector
from sheetorders.domain.feedback import FeedbackFormatter, RowFeedback, ValidationSummary
from sheetorders.domain.ingest_pipeline import IngestionPipeline
from sheetorders.domain.numbering import OrderNumberAllocator
from sheetorders.domain.ports.unit_of_work import OrderUnitOfWork
from sheetorders.domain.resolution import EntityResolver
from sheetorders.domain.validation import DEFAULT_RULES, ValidationOrchestrator, ValidationRules

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from uuid import UUID

    from sheetorders.adapters.sheets import ColumnMapping
    from sheetorders.config.ingest import IngestSettings
    from sheetorders.domain.dates import Clock

UnitOfWorkFactory = Callable[[], OrderUnitOfWork]

log = logging.getLogger(__name__)


@dataclass(slots=True)
class SheetSyncReport:
    result: SyncRowsResult
    feedback: list[RowFeedback]


def bootstrap(*, database_uri: str | None = None, log_level: int | str | None = None) -> None:
    """Load ``.env``, configure logging and start the record store adapter once."""

    load_dotenv()
    configure_logging(level=log_level)
    if not is_started():
        startup(database_uri=database_uri)


def build_pipeline(
    *,
    settings: IngestSettings | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    rules: ValidationRules = DEFAULT_RULES,
    clock: Clock = utcnow,
) -> IngestionPipeline:
    """Wire the ingestion pipeline with the configured collaborators."""

    effective_settings = settings or get_ingest_settings()
    resolver = EntityResolver(effective_settings, clock=clock)
    return IngestionPipeline(
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyOrderUnitOfWork,
        orchestrator=ValidationOrchestrator(resolver, clock=clock),
        resolver=resolver,
        detector=DuplicateDetector(effective_settings, clock=clock),
        allocator=OrderNumberAllocator(clock=clock),
        rules=rules,
        settings=effective_settings,
        clock=clock,
    )


def sync_sheet_rows(
    rows: Iterable[Sequence[object]],
    column_mapping: ColumnMapping | Mapping[str, object],
    *,
    connection_id: UUID,
    pipeline: IngestionPipeline | None = None,
    settings: IngestSettings | None = None,
    locale: str | None = None,
    force_resync: bool = False,
) -> SheetSyncReport:
    """Translate fetched sheet rows, ingest them and build per-row feedback."""

    effective_settings = settings or (pipeline.settings if pipeline else get_ingest_settings())
    if pipeline is None:
        bootstrap()
        pipeline = build_pipeline(settings=effective_settings)

    today = pipeline.clock().date()
    raw_rows = translate_rows(rows, column_mapping, today=today)
    log.info(
        "Starting sheet sync: connection=%s, rows=%d, batch_size=%d, force_resync=%s",
        connection_id,
        len(raw_rows),
        effective_settings.batch_size,
        force_resync,
    )
    result = sync_rows(
        raw_rows,
        pipeline=pipeline,
        connection_id=connection_id,
        batch_size=effective_settings.batch_size,
        force_resync=force_resync,
    )

    formatter = FeedbackFormatter(effective_settings.message_max_length)
    effective_locale = locale or effective_settings.default_locale
    feedback = [
        formatter.row_feedback(outcome, row.row_number, effective_locale)
        for row, outcome in result.outcomes
    ]
    return SheetSyncReport(result=result, feedback=feedback)


def validate_sheet_rows(
    rows: Iterable[Sequence[object]],
    column_mapping: ColumnMapping | Mapping[str, object],
    *,
    connection_id: UUID,
    spreadsheet_id: str,
    settings: IngestSettings | None = None,
    rules: ValidationRules = DEFAULT_RULES,
    locale: str | None = None,
    clock: Clock = utcnow,
) -> ValidationSummary:
    """Dry run: validate sheet rows without touching the record store."""

    effective_settings = settings or get_ingest_settings()
    raw_rows = translate_rows(rows, column_mapping, today=clock().date())
    resolver = EntityResolver(effective_settings, clock=clock)
    orchestrator = ValidationOrchestrator(resolver, clock=clock)
    results = validate_rows(
        raw_rows,
        orchestrator=orchestrator,
        rules=rules,
        max_workers=effective_settings.validation_workers,
    )

    formatter = FeedbackFormatter(effective_settings.message_max_length)
    checked = list(zip(raw_rows, results, strict=True))
    formatter.log_validation_errors(checked, connection_id, spreadsheet_id)
    summary = formatter.create_validation_summary(
        ((row.row_number, result) for row, result in checked),
        locale or effective_settings.default_locale,
    )
    log.info(summary.summary)
    return summary
