"""Catalog and order entities owned by the record store."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sheetorders.domain.model.enums import Currency, OrderStatus, PaymentMethod
from sheetorders.domain.model.validation import ResolvedProduct

if TYPE_CHECKING:
    from datetime import date, datetime

DEFAULT_STOCK_QUANTITY = 100
ORDER_SOURCE_GOOGLE_SHEETS = "google_sheets"


def new_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class Entity:
    """Internal identity exists immediately in the domain."""

    id: UUID = field(default_factory=new_id)


@dataclass(eq=False, kw_only=True)
class PlatformConnection(Entity):
    """A connected spreadsheet account; only its owning organization matters here."""

    organization_id: UUID
    provider: str = ORDER_SOURCE_GOOGLE_SHEETS


@dataclass(eq=False, kw_only=True)
class Store(Entity):
    organization_id: UUID
    name: str
    is_active: bool = True
    created_at: datetime | None = None


@dataclass(eq=False, kw_only=True)
class Customer(Entity):
    organization_id: UUID
    first_name: str
    last_name: str = ""
    phone: str | None = None
    alternate_phone: str | None = None
    email: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None
    created_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(eq=False, kw_only=True)
class Product(Entity):
    organization_id: UUID
    name: str
    sku: str | None = None
    price: Decimal = Decimal(0)
    currency: Currency = Currency.MAD
    stock_quantity: int = DEFAULT_STOCK_QUANTITY
    created_at: datetime | None = None

    def to_resolved(self) -> ResolvedProduct:
        return ResolvedProduct(
            id=self.id,
            name=self.name,
            sku=self.sku,
            catalog_price=self.price,
            currency=self.currency,
        )


@dataclass(eq=False, kw_only=True)
class OrderItem(Entity):
    product_id: UUID
    quantity: int
    unit_price: Decimal
    total: Decimal
    order_id: UUID | None = None


@dataclass(eq=False, kw_only=True)
class Order(Entity):
    """Canonical order created exactly once per accepted sheet row."""

    order_number: str
    organization_id: UUID
    customer_id: UUID
    store_id: UUID
    order_date: date
    shipping_address: str
    shipping_city: str
    shipping_phone: str | None
    subtotal: Decimal
    total: Decimal
    currency: Currency = Currency.MAD
    status: OrderStatus = OrderStatus.NEW
    payment_method: PaymentMethod = PaymentMethod.COD
    source: str = ORDER_SOURCE_GOOGLE_SHEETS
    source_row_number: int | None = None
    notes: str | None = None
    created_at: datetime | None = None
    items: list[OrderItem] = field(default_factory=list["OrderItem"])

    def add_item(self, item: OrderItem) -> None:
        item.order_id = self.id
        self.items.append(item)
