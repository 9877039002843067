"""Entity resolution phase: customer, product and default store."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sheetorders.domain.ingest_pipeline.context import RowContext
    from sheetorders.domain.model import RawOrderRow
    from sheetorders.domain.resolution import EntityResolver


class ResolutionPhase:
    name: str = "resolution"

    def __init__(self, resolver: EntityResolver) -> None:
        self.resolver = resolver

    def run(self, row: RawOrderRow, *, context: RowContext) -> None:
        uow, organization_id = context.uow, context.organization_id
        context.customer = self.resolver.resolve_customer(uow, row, organization_id)
        context.product = self.resolver.resolve_product(uow, row, organization_id)
        context.store = self.resolver.resolve_default_store(uow, organization_id)
