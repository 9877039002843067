"""Per-row verdicts and outcomes produced by the ingestion pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sheetorders.domain.model.enums import DuplicateClassification, DuplicateStage, SyncErrorType

if TYPE_CHECKING:
    from uuid import UUID

    from sheetorders.domain.model.validation import ValidationResult


@dataclass(frozen=True, slots=True)
class DuplicateVerdict:
    classification: DuplicateClassification
    stage: DuplicateStage = DuplicateStage.NONE
    matched_order_id: UUID | None = None
    matched_order_number: str | None = None
    similarity: float | None = None
    conflicting_fields: tuple[str, ...] = ()
    reason: str | None = None
    notes: str | None = None

    @property
    def is_duplicate(self) -> bool:
        return self.classification is not DuplicateClassification.NEW


@dataclass(frozen=True, slots=True)
class SyncError:
    row_number: int
    error_type: SyncErrorType
    error_message: str
    field: str | None = None
    suggested_fix: str | None = None


@dataclass(frozen=True, slots=True)
class IngestionOutcome:
    created: bool = False
    order_id: UUID | None = None
    order_number: str | None = None
    skipped: bool = False
    flagged: bool = False
    reason: str | None = None
    validation_result: ValidationResult | None = None
    error: SyncError | None = None
