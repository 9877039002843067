"""Pydantic models describing spreadsheet column mappings and row payloads."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, Field, field_validator

_COLUMN_LETTERS = re.compile(r"^[A-Z]{1,3}$")
_NON_NUMERIC = re.compile(r"[^\d.-]")
_LEADING_INT = re.compile(r"^\s*(-?\d+)")


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class SheetBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class ColumnMapping(SheetBaseModel):
    """Which sheet column (``A``, ``B``, ... ``AA``) holds which order field."""

    customer_name: str | None = Field(default=None, alias="customerName")
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    email: str | None = None
    product_name: str | None = Field(default=None, alias="productName")
    product_sku: str | None = Field(default=None, alias="productSku")
    product_quantity: str | None = Field(default=None, alias="productQuantity")
    product_variant: str | None = Field(default=None, alias="productVariant")
    price: str | None = None
    date: str | None = None
    order_id: str | None = Field(default=None, alias="orderId")
    alternate_phone: str | None = Field(default=None, alias="alternatePhone")
    postal_code: str | None = Field(default=None, alias="postalCode")
    notes: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _normalize_letters(cls, value: object) -> object:
        value = _blank_to_none(value)
        if isinstance(value, str):
            upper = value.upper()
            if not _COLUMN_LETTERS.match(upper):
                raise ValueError(f"Invalid column letter: {value!r}")
            return upper
        return value


class SheetRowPayload(SheetBaseModel):
    """Cell values of one row after column lookup, before domain translation."""

    customer_name: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    email: str | None = None
    product_name: str = ""
    product_sku: str | None = None
    product_quantity: int = 1
    product_variant: str | None = None
    price: Decimal | str | None = None
    date: str | None = None
    order_id: str | None = None
    alternate_phone: str | None = None
    postal_code: str | None = None
    notes: str | None = None

    _normalize_optional = field_validator(
        "email",
        "product_sku",
        "product_variant",
        "date",
        "order_id",
        "alternate_phone",
        "postal_code",
        "notes",
        mode="before",
    )(_blank_to_none)

    @field_validator("customer_name", "phone", "address", "city", "product_name", mode="before")
    @classmethod
    def _strip_required(cls, value: object) -> object:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else str(value)

    @field_validator("product_quantity", mode="before")
    @classmethod
    def _parse_quantity(cls, value: object) -> int:
        if isinstance(value, bool):
            return 1
        if isinstance(value, int):
            return value or 1
        match = _LEADING_INT.match(str(value)) if value is not None else None
        if match is None:
            return 1
        return int(match.group(1)) or 1

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value: object) -> Decimal | str | None:
        """Strip currency text (``"150 MAD"`` -> ``150``); unparseable text stays as-is."""

        value = _blank_to_none(value)
        if value is None or isinstance(value, Decimal):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return Decimal(str(value))
        text = str(value)
        cleaned = _NON_NUMERIC.sub("", text)
        try:
            return Decimal(cleaned)
        except InvalidOperation:
            return text

    @property
    def is_empty(self) -> bool:
        return not (self.customer_name or self.phone or self.product_name)
