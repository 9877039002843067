"""Validation phase: stop the row early when it carries errors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sheetorders.domain.feedback import convert_to_sync_errors
from sheetorders.domain.model import IngestionOutcome

if TYPE_CHECKING:
    from sheetorders.domain.ingest_pipeline.context import RowContext
    from sheetorders.domain.model import RawOrderRow
    from sheetorders.domain.validation import ValidationOrchestrator

log = logging.getLogger(__name__)


class ValidationPhase:
    name: str = "validation"

    def __init__(self, orchestrator: ValidationOrchestrator) -> None:
        self.orchestrator = orchestrator

    def run(self, row: RawOrderRow, *, context: RowContext) -> None:
        result = self.orchestrator.validate(
            context.uow, row, context.organization_id, context.rules
        )
        context.validation = result
        if result.is_valid:
            return

        sync_errors = convert_to_sync_errors(result, row.row_number)
        log.info("Row %s rejected with %d validation errors", row.row_number, len(sync_errors))
        context.outcome = IngestionOutcome(
            created=False,
            reason="Validation failed",
            validation_result=result,
            error=sync_errors[0],
        )
