"""Application services for validating and syncing batches of sheet rows."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from itertools import batched
from typing import TYPE_CHECKING

from sheetorders.config.ingest import DEFAULT_BATCH_SIZE, DEFAULT_VALIDATION_WORKERS

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from uuid import UUID

    from sheetorders.domain.ingest_pipeline import IngestionPipeline
    from sheetorders.domain.model import IngestionOutcome, RawOrderRow, SyncError, ValidationResult
    from sheetorders.domain.validation import ValidationOrchestrator, ValidationRules

log = logging.getLogger(__name__)


@dataclass(slots=True)
class SyncRowsResult:
    """Outcome of a batch sync."""

    processed: int = 0
    created: int = 0
    skipped: int = 0
    flagged: int = 0
    failed: int = 0
    errors: list[SyncError] = field(default_factory=list["SyncError"])
    outcomes: list[tuple[RawOrderRow, IngestionOutcome]] = field(
        default_factory=list[tuple["RawOrderRow", "IngestionOutcome"]]
    )

    def record(self, row: RawOrderRow, outcome: IngestionOutcome) -> None:
        self.processed += 1
        self.outcomes.append((row, outcome))
        if outcome.created:
            self.created += 1
            if outcome.flagged:
                self.flagged += 1
        elif outcome.skipped:
            self.skipped += 1
        else:
            self.failed += 1
        if outcome.error is not None:
            self.errors.append(outcome.error)


def validate_rows(
    rows: Sequence[RawOrderRow],
    *,
    orchestrator: ValidationOrchestrator,
    rules: ValidationRules | None = None,
    max_workers: int = DEFAULT_VALIDATION_WORKERS,
) -> list[ValidationResult]:
    """Validate ``rows`` concurrently without touching the store.

    Results come back in input order.
    """

    if not rows:
        return []
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="validate") as pool:
        return list(pool.map(lambda row: orchestrator.validate_fields(row, rules), rows))


def sync_rows(
    rows: Sequence[RawOrderRow],
    *,
    pipeline: IngestionPipeline,
    connection_id: UUID,
    batch_size: int = DEFAULT_BATCH_SIZE,
    force_resync: bool = False,
    on_batch: Callable[[SyncRowsResult], None] | None = None,
) -> SyncRowsResult:
    """Run every row through ``pipeline`` in chunks of ``batch_size``.

    ``IngestionPipeline.process`` never raises, so a failing row is recorded and
    the batch carries on.
    """

    if batch_size < 1:
        raise ValueError("batch_size must be positive")

    result = SyncRowsResult()
    for index, chunk in enumerate(batched(rows, batch_size), start=1):
        log.debug("Processing batch %d (%d rows)", index, len(chunk))
        for row in chunk:
            result.record(row, pipeline.process(row, connection_id, force_resync=force_resync))
        if on_batch is not None:
            on_batch(result)

    log.info(
        "Synced %d rows for connection %s: created=%d skipped=%d flagged=%d failed=%d",
        result.processed,
        connection_id,
        result.created,
        result.skipped,
        result.flagged,
        result.failed,
    )
    return result


__all__ = ["SyncRowsResult", "sync_rows", "validate_rows"]
