"""Persistence phase: number, build and commit the order."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from sheetorders.domain.dates import parse_order_date, utcnow
from sheetorders.domain.errors import DuplicateEntityError
from sheetorders.domain.model import (
    DuplicateClassification,
    IngestionOutcome,
    Order,
    OrderItem,
)
from sheetorders.domain.normalization import blank_to_none, canonical_phone, coerce_price

if TYPE_CHECKING:
    from sheetorders.domain.dates import Clock
    from sheetorders.domain.ingest_pipeline.context import RowContext
    from sheetorders.domain.model import RawOrderRow
    from sheetorders.domain.numbering import OrderNumberAllocator

log = logging.getLogger(__name__)


class PersistencePhase:
    name: str = "persistence"

    def __init__(
        self,
        allocator: OrderNumberAllocator,
        *,
        max_attempts: int = 3,
        clock: Clock = utcnow,
    ) -> None:
        self.allocator = allocator
        self.max_attempts = max_attempts
        self._clock = clock

    def run(self, row: RawOrderRow, *, context: RowContext) -> None:
        order = self._commit_order(row, context)

        verdict = context.verdict
        flagged = verdict is not None and verdict.classification is DuplicateClassification.FLAG
        log.info(
            "Created order %s from row %s (flagged=%s)",
            order.order_number,
            row.row_number,
            flagged,
        )
        context.outcome = IngestionOutcome(
            created=True,
            order_id=order.id,
            order_number=order.order_number,
            flagged=flagged,
            reason=verdict.reason if flagged and verdict is not None else None,
            validation_result=context.validation,
        )

    def _commit_order(self, row: RawOrderRow, context: RowContext) -> Order:
        uow = context.uow
        attempt = 1
        while True:
            try:
                with self.allocator.reserve(uow, context.organization_id) as order_number:
                    order = self.build_order(row, order_number, context=context)
                    uow.repositories.orders.add(order)
                    uow.commit()
            except DuplicateEntityError:
                uow.rollback()
                if attempt >= self.max_attempts:
                    raise
                log.warning(
                    "Order number collision for organization %s (attempt %d/%d), retrying",
                    context.organization_id,
                    attempt,
                    self.max_attempts,
                )
                attempt += 1
            else:
                return order

    def build_order(self, row: RawOrderRow, order_number: str, *, context: RowContext) -> Order:
        customer, product, store = context.require_resolved()
        now = self._clock()
        unit_price = coerce_price(row.unit_price) or Decimal(0)
        quantity = row.quantity or 1
        total = unit_price * quantity

        order = Order(
            order_number=order_number,
            organization_id=context.organization_id,
            customer_id=customer.id,
            store_id=store.id,
            order_date=parse_order_date(row.date) or now.date(),
            shipping_address=row.address.strip(),
            shipping_city=row.city.strip(),
            shipping_phone=canonical_phone(row.phone),
            subtotal=total,
            total=total,
            currency=product.currency,
            source_row_number=row.row_number,
            notes=_order_notes(row, context),
            created_at=now,
        )
        order.add_item(
            OrderItem(product_id=product.id, quantity=quantity, unit_price=unit_price, total=total)
        )
        return order


def _order_notes(row: RawOrderRow, context: RowContext) -> str | None:
    parts: list[str] = []
    if note := blank_to_none(row.notes):
        parts.append(note)
    if variant := blank_to_none(row.product_variant):
        parts.append(f"Variant: {variant}")
    verdict = context.verdict
    if verdict is not None and verdict.classification is DuplicateClassification.FLAG:
        if verdict.notes:
            parts.append(verdict.notes)
    return "\n\n".join(parts) or None
