from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from sheetorders.domain.dates import day_bounds, parse_order_date, shift_months, shift_years
from sheetorders.domain.normalization import (
    coerce_price,
    decimal_places,
    normalize_text,
    phone_digits,
    product_name_key,
    split_customer_name,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2024-03-05", date(2024, 3, 5)),
        ("2024-03-05T23:10:00+01:00", date(2024, 3, 5)),
        ("5/3/2024", date(2024, 3, 5)),
        ("05-03-2024", date(2024, 3, 5)),
        ("2024/3/5", date(2024, 3, 5)),
        (" 05.03.2024 ", date(2024, 3, 5)),
        ("03/25/2024", None),
        ("", None),
    ],
)
def test_parse_order_date(raw: str, expected: date | None) -> None:
    assert parse_order_date(raw) == expected


def test_shift_months_clamps_to_month_end() -> None:
    assert shift_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert shift_months(date(2024, 12, 15), 1) == date(2025, 1, 15)
    assert shift_years(date(2024, 2, 29), -1) == date(2023, 2, 28)


def test_day_bounds_are_half_open_utc() -> None:
    start, end = day_bounds(date(2024, 3, 15))

    assert start == datetime(2024, 3, 15, tzinfo=UTC)
    assert end == datetime(2024, 3, 16, tzinfo=UTC)


def test_text_and_phone_normalization() -> None:
    assert normalize_text("  12  Rue\tHassan II ") == "12 rue hassan ii"
    assert phone_digits("06 87 65 43 21") == "212687654321"
    assert phone_digits(None) == ""
    assert split_customer_name("Ahmed") == ("Ahmed", "")
    assert split_customer_name("Ahmed  Ben Ali") == ("Ahmed", "Ben Ali")


def test_price_coercion() -> None:
    assert coerce_price(" 12.5 ") == Decimal("12.5")
    assert coerce_price(3) == Decimal(3)
    assert coerce_price(False) is None
    assert coerce_price(Decimal("NaN")) is None
    assert decimal_places(Decimal("1.2300")) == 2
    assert decimal_places(Decimal("1E+2")) == 0


def test_product_name_key_folds_unicode_case_and_spacing() -> None:
    assert product_name_key("  Éponge   Naturelle ") == "éponge naturelle"
    assert product_name_key("ÉPONGE NATURELLE") == product_name_key("éponge naturelle")
    assert product_name_key("Straße") == product_name_key("STRASSE")
    assert product_name_key(None) == ""
