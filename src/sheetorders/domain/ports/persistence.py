"""Record store ports used by resolution, duplicate detection and numbering.

Every call is scoped to an organization; implementations must never return rows
belonging to another tenant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sheetorders.domain.model import Customer, Order, Product, Store

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date, datetime
    from decimal import Decimal
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class OrderSnapshot:
    """Read model of a persisted order, flattened for duplicate scoring."""

    id: UUID
    order_number: str
    order_date: date
    created_at: datetime | None
    customer_first_name: str
    customer_last_name: str
    customer_phone: str | None
    shipping_address: str
    total: Decimal
    unit_price: Decimal | None
    product_names: tuple[str, ...] = ()
    product_skus: tuple[str | None, ...] = ()

    @property
    def customer_full_name(self) -> str:
        return f"{self.customer_first_name} {self.customer_last_name}".strip()


@dataclass(frozen=True, slots=True)
class ExactMatchCriteria:
    organization_id: UUID
    order_date: date
    customer_phone: str
    product_id: UUID
    shipping_address: str
    total: Decimal


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ConnectionRepository(Protocol):
    def organization_for(self, connection_id: UUID) -> UUID | None: ...


@runtime_checkable
class CustomerRepository(Repository[Customer], Protocol):
    def find_by_phone(self, organization_id: UUID, phone: str) -> Customer | None: ...

    def find_by_name(
        self, organization_id: UUID, first_name: str, last_name: str
    ) -> Customer | None: ...


@runtime_checkable
class ProductRepository(Repository[Product], Protocol):
    def find_by_sku(self, organization_id: UUID, sku: str) -> Product | None: ...

    def find_by_name(self, organization_id: UUID, name: str) -> Product | None:
        """Case-insensitive exact name match."""
        ...

    def list_for_organization(self, organization_id: UUID, *, limit: int) -> Sequence[Product]: ...


@runtime_checkable
class StoreRepository(Repository[Store], Protocol):
    def find_default(self, organization_id: UUID) -> Store | None:
        """Return the earliest created active store."""
        ...


@runtime_checkable
class OrderRepository(Repository[Order], Protocol):
    def count_created_since(self, organization_id: UUID, since: datetime) -> int: ...

    def find_exact_duplicate(self, criteria: ExactMatchCriteria) -> OrderSnapshot | None: ...

    def find_on_date(self, organization_id: UUID, order_date: date) -> Sequence[OrderSnapshot]:
        """Orders of one calendar day, oldest first."""
        ...

    def find_in_range(
        self,
        organization_id: UUID,
        start: date,
        end: date,
        *,
        exclude: date | None = None,
    ) -> Sequence[OrderSnapshot]:
        """Orders with ``start <= order_date <= end`` minus ``exclude``, oldest first."""
        ...
