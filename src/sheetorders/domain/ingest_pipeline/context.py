"""Per-row state shared by the ingestion phases."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from sheetorders.domain.model import (
        Customer,
        DuplicateVerdict,
        IngestionOutcome,
        Product,
        Store,
        ValidationResult,
    )
    from sheetorders.domain.ports import OrderUnitOfWork
    from sheetorders.domain.validation import ValidationRules


@dataclass(slots=True, kw_only=True)
class RowContext:
    """Mutable scratchpad for one row.

    A phase that decides the row's fate sets ``outcome``; the pipeline stops
    running further phases as soon as it is set.
    """

    uow: OrderUnitOfWork
    connection_id: UUID
    organization_id: UUID
    rules: ValidationRules
    force_resync: bool = False

    validation: ValidationResult | None = None
    customer: Customer | None = None
    product: Product | None = None
    store: Store | None = None
    verdict: DuplicateVerdict | None = None
    outcome: IngestionOutcome | None = None

    @property
    def finished(self) -> bool:
        return self.outcome is not None

    def require_resolved(self) -> tuple[Customer, Product, Store]:
        if self.customer is None or self.product is None or self.store is None:
            raise RuntimeError("Entity resolution must run before this phase")
        return self.customer, self.product, self.store
