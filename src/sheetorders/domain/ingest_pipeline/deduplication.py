"""Duplicate detection phase: skip known orders, remember flagged ones."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sheetorders.domain.model import DuplicateClassification, IngestionOutcome

if TYPE_CHECKING:
    from sheetorders.domain.duplicates import DuplicateDetector
    from sheetorders.domain.ingest_pipeline.context import RowContext
    from sheetorders.domain.model import RawOrderRow


class DuplicateDetectionPhase:
    name: str = "deduplication"

    def __init__(self, detector: DuplicateDetector) -> None:
        self.detector = detector

    def run(self, row: RawOrderRow, *, context: RowContext) -> None:
        _, product, _ = context.require_resolved()
        verdict = self.detector.detect(
            context.uow,
            row,
            organization_id=context.organization_id,
            product_id=product.id,
            force_resync=context.force_resync,
        )
        context.verdict = verdict
        if verdict.classification is DuplicateClassification.SKIP:
            context.outcome = IngestionOutcome(
                created=False,
                skipped=True,
                order_id=verdict.matched_order_id,
                order_number=verdict.matched_order_number,
                reason=verdict.reason,
                validation_result=context.validation,
            )
