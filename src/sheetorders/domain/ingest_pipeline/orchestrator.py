"""Phase-based orchestrator turning one sheet row into at most one order."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from sheetorders.config.ingest import IngestSettings
from sheetorders.domain.dates import utcnow
from sheetorders.domain.errors import ConnectionNotFoundError
from sheetorders.domain.ingest_pipeline.context import RowContext
from sheetorders.domain.ingest_pipeline.deduplication import DuplicateDetectionPhase
from sheetorders.domain.ingest_pipeline.persistence import PersistencePhase
from sheetorders.domain.ingest_pipeline.resolution import ResolutionPhase
from sheetorders.domain.ingest_pipeline.validation import ValidationPhase
from sheetorders.domain.model import IngestionOutcome, SyncError, SyncErrorType
from sheetorders.domain.validation import DEFAULT_RULES

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from uuid import UUID

    from sheetorders.domain.dates import Clock
    from sheetorders.domain.duplicates import DuplicateDetector
    from sheetorders.domain.model import RawOrderRow
    from sheetorders.domain.numbering import OrderNumberAllocator
    from sheetorders.domain.ports import OrderUnitOfWork
    from sheetorders.domain.resolution import EntityResolver
    from sheetorders.domain.validation import ValidationOrchestrator, ValidationRules

log = logging.getLogger(__name__)


class PipelinePhase(Protocol):
    """Contract implemented by each ingestion phase."""

    name: str

    def run(self, row: RawOrderRow, *, context: RowContext) -> None: ...


@dataclass(slots=True, kw_only=True)
class IngestionPipeline:
    """Compose and execute the ordered row phases.

    Phases run inside one unit of work per row: validation, entity resolution,
    duplicate detection and persistence. A phase that settles the row's outcome
    ends the run early. ``process`` never raises; failures come back as a
    ``system`` sync error on the outcome.
    """

    unit_of_work_factory: Callable[[], OrderUnitOfWork]
    orchestrator: ValidationOrchestrator
    resolver: EntityResolver
    detector: DuplicateDetector
    allocator: OrderNumberAllocator
    rules: ValidationRules = DEFAULT_RULES
    settings: IngestSettings = field(default_factory=IngestSettings)
    clock: Clock = utcnow
    phases: Sequence[PipelinePhase] = field(default=(), init=False)

    def __post_init__(self) -> None:
        self.phases = (
            ValidationPhase(self.orchestrator),
            ResolutionPhase(self.resolver),
            DuplicateDetectionPhase(self.detector),
            PersistencePhase(
                self.allocator,
                max_attempts=self.settings.order_number_retries,
                clock=self.clock,
            ),
        )

    def process(
        self, row: RawOrderRow, connection_id: UUID, *, force_resync: bool = False
    ) -> IngestionOutcome:
        try:
            return self._process(row, connection_id, force_resync=force_resync)
        except Exception as exc:
            log.exception(
                "Failed to process row %s for connection %s", row.row_number, connection_id
            )
            return IngestionOutcome(
                created=False,
                error=SyncError(
                    row_number=row.row_number,
                    error_type=SyncErrorType.SYSTEM,
                    error_message=str(exc),
                ),
            )

    def _process(
        self, row: RawOrderRow, connection_id: UUID, *, force_resync: bool
    ) -> IngestionOutcome:
        with self.unit_of_work_factory() as uow:
            organization_id = uow.repositories.connections.organization_for(connection_id)
            if organization_id is None:
                raise ConnectionNotFoundError(connection_id)

            context = RowContext(
                uow=uow,
                connection_id=connection_id,
                organization_id=organization_id,
                rules=self.rules,
                force_resync=force_resync,
            )
            for phase in self.phases:
                log.debug("Row %s: running phase %s", row.row_number, phase.name)
                phase.run(row, context=context)
                if context.finished:
                    break

        if context.outcome is None:
            raise RuntimeError(f"Pipeline finished row {row.row_number} without an outcome")
        return context.outcome
