"""Raw spreadsheet rows as handed over by the sheet source."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

type RawPrice = Decimal | float | int | str | None


@dataclass(frozen=True, slots=True, kw_only=True)
class RawOrderRow:
    """One source record. Values are kept as read; validation decides what they mean."""

    row_number: int
    date: str
    customer_name: str
    phone: str
    address: str
    city: str
    product_name: str
    quantity: int | None = 1
    unit_price: RawPrice = None
    email: str | None = None
    product_sku: str | None = None
    order_id: str | None = None

    alternate_phone: str | None = None
    postal_code: str | None = None
    product_variant: str | None = None
    notes: str | None = None
