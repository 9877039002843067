"""Translate raw spreadsheet cells into domain ``RawOrderRow`` records."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from sheetorders.domain.model import RawOrderRow

from .schema import ColumnMapping, SheetRowPayload

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from datetime import date

log = getLogger(__name__)

# Row 1 holds the headers.
FIRST_DATA_ROW = 2


def column_index(letter: str) -> int:
    """``A`` -> 0, ``Z`` -> 25, ``AA`` -> 26."""

    if not letter or not letter.isalpha():
        raise ValueError(f"Invalid column letter: {letter!r}")
    result = 0
    for char in letter.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1


def _cell(cells: Sequence[object], letter: str | None) -> str | None:
    if letter is None:
        return None
    index = column_index(letter)
    if index >= len(cells):
        return None
    value = cells[index]
    if value is None:
        return None
    return str(value).strip()


def extract_payload(cells: Sequence[object], mapping: ColumnMapping) -> SheetRowPayload:
    values = {
        name: _cell(cells, getattr(mapping, name)) for name in ColumnMapping.model_fields
    }
    return SheetRowPayload.model_validate({k: v for k, v in values.items() if v is not None})


def translate_row(
    cells: Sequence[object],
    row_number: int,
    mapping: ColumnMapping | Mapping[str, object],
    *,
    today: date,
) -> RawOrderRow | None:
    """Return the row as a ``RawOrderRow`` or ``None`` for blank rows.

    A missing date defaults to ``today``; validation decides about the rest.
    """

    column_mapping = (
        mapping if isinstance(mapping, ColumnMapping) else ColumnMapping.model_validate(mapping)
    )
    try:
        payload = extract_payload(cells, column_mapping)
    except ValidationError:
        log.warning("Failed to parse sheet row %s", row_number, exc_info=True)
        return None
    if payload.is_empty:
        return None

    return RawOrderRow(
        row_number=row_number,
        date=payload.date or today.isoformat(),
        customer_name=payload.customer_name,
        phone=payload.phone,
        address=payload.address,
        city=payload.city,
        product_name=payload.product_name,
        quantity=payload.product_quantity,
        unit_price=payload.price,
        email=payload.email,
        product_sku=payload.product_sku,
        order_id=payload.order_id,
        alternate_phone=payload.alternate_phone,
        postal_code=payload.postal_code,
        product_variant=payload.product_variant,
        notes=payload.notes,
    )


def translate_rows(
    rows: Iterable[Sequence[object]],
    mapping: ColumnMapping | Mapping[str, object],
    *,
    today: date,
    first_row_number: int = FIRST_DATA_ROW,
) -> list[RawOrderRow]:
    column_mapping = (
        mapping if isinstance(mapping, ColumnMapping) else ColumnMapping.model_validate(mapping)
    )
    translated: list[RawOrderRow] = []
    for offset, cells in enumerate(rows):
        row = translate_row(cells, first_row_number + offset, column_mapping, today=today)
        if row is not None:
            translated.append(row)
    log.debug("Translated %d of the fetched sheet rows", len(translated))
    return translated
