from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from sheetorders.domain.model import Currency, IssueCode, PhoneFormat, ValidationIssue
from sheetorders.domain.validation import (
    ADDRESS_RULE,
    CITY_RULE,
    CUSTOMER_NAME_RULE,
    canonical_phone,
    validate_date,
    validate_email,
    validate_phone,
    validate_price,
    validate_quantity,
    validate_required_text,
)

TODAY = date(2024, 3, 15)


def _codes(issues: tuple[ValidationIssue, ...]) -> list[IssueCode]:
    return [issue.code for issue in issues]


@pytest.mark.parametrize(
    "raw",
    ["0687654321", "+212687654321", "212687654321", "+212 6 87 65 43 21", "07-76-54-32-10"],
)
def test_morocco_phone_accepts_local_and_prefixed_forms(raw: str) -> None:
    result = validate_phone(raw)

    assert result.is_valid
    assert result.warnings == ()


def test_morocco_prefixes_share_one_canonical_form() -> None:
    assert canonical_phone("0687654321") == "+212687654321"
    assert canonical_phone("+212687654321") == "+212687654321"
    assert canonical_phone("212 687 654 321") == "+212687654321"


def test_canonical_phone_keeps_non_moroccan_numbers_cleaned() -> None:
    assert canonical_phone("+33 6 98 76 54 32") == "+33698765432"
    assert canonical_phone("n/a") is None


def test_morocco_phone_rejects_non_mobile_prefix() -> None:
    result = validate_phone("+212412345678")

    assert not result.is_valid
    assert _codes(result.errors) == [IssueCode.INVALID_FORMAT]
    assert result.errors[0].suggested_fix == "Use format: +212XXXXXXXXX or 0XXXXXXXXX"


def test_missing_phone_is_required() -> None:
    result = validate_phone("   ")

    assert _codes(result.errors) == [IssueCode.REQUIRED_FIELD_MISSING]
    assert result.errors[0].field == "phone"


def test_phone_without_digits_is_invalid_format() -> None:
    result = validate_phone("call me")

    assert _codes(result.errors) == [IssueCode.INVALID_FORMAT]
    assert result.errors[0].message == "Phone number contains invalid characters"


def test_short_phone_reports_length_and_format() -> None:
    result = validate_phone("06875")

    assert _codes(result.errors) == [IssueCode.INVALID_LENGTH, IssueCode.INVALID_FORMAT]
    assert result.errors[0].message == "Phone number is too short"


def test_long_phone_reports_length() -> None:
    result = validate_phone("+2126876543210000")

    assert result.errors[0].code is IssueCode.INVALID_LENGTH
    assert result.errors[0].message == "Phone number is too long"


@pytest.mark.parametrize("raw", ["0611111111", "0612345678", "+212 6 00 00 00 00"])
def test_suspicious_phone_is_only_a_warning(raw: str) -> None:
    result = validate_phone(raw)

    assert result.is_valid
    assert _codes(result.warnings) == [IssueCode.SUSPICIOUS_VALUE]


def test_international_format_requires_plus_prefix() -> None:
    assert validate_phone("+33698765432", PhoneFormat.INTERNATIONAL).is_valid

    result = validate_phone("0698765432", PhoneFormat.INTERNATIONAL)
    assert _codes(result.errors) == [IssueCode.INVALID_FORMAT]


def test_any_format_accepts_trunk_prefixed_numbers() -> None:
    assert validate_phone("0698765432", PhoneFormat.ANY).is_valid
    assert validate_phone("+4915298765432", PhoneFormat.ANY).is_valid


def test_validators_are_pure() -> None:
    assert validate_phone("0687654321") == validate_phone("0687654321")
    assert validate_price(Decimal("99.999")) == validate_price(Decimal("99.999"))
    assert validate_date("2024-03-01", today=TODAY) == validate_date("2024-03-01", today=TODAY)


def test_price_with_three_decimals_warns_about_precision() -> None:
    result = validate_price(Decimal("99.999"))

    assert result.is_valid
    assert _codes(result.warnings) == [IssueCode.PRECISION_WARNING]


def test_float_price_keeps_written_precision() -> None:
    result = validate_price(99.999)

    assert _codes(result.warnings) == [IssueCode.PRECISION_WARNING]


def test_negative_price_is_an_error() -> None:
    result = validate_price(Decimal(-10))

    assert not result.is_valid
    assert _codes(result.errors) == [IssueCode.INVALID_VALUE]
    assert result.errors[0].message == "Price cannot be negative"


@pytest.mark.parametrize("price", [None, "", "  "])
def test_missing_price_is_required(price: str | None) -> None:
    result = validate_price(price)

    assert _codes(result.errors) == [IssueCode.REQUIRED_FIELD_MISSING]


@pytest.mark.parametrize("price", ["abc", float("nan"), float("inf"), True])
def test_non_numeric_price_is_invalid_type(price: object) -> None:
    result = validate_price(price)  # type: ignore[arg-type]

    assert _codes(result.errors) == [IssueCode.INVALID_TYPE]


def test_numeric_string_price_is_accepted() -> None:
    result = validate_price("150.50")

    assert result.is_valid
    assert result.warnings == ()


def test_zero_price_warns() -> None:
    result = validate_price(0)

    assert result.is_valid
    assert [w.message for w in result.warnings] == ["Price is zero, please verify"]


def test_sub_unit_mad_price_warns() -> None:
    result = validate_price(Decimal("0.50"))

    assert [w.message for w in result.warnings] == ["Price less than 1 MAD, please verify"]


def test_high_mad_price_warns() -> None:
    result = validate_price(Decimal(150_000))

    assert [w.message for w in result.warnings] == [
        "Very high price for MAD currency, please verify"
    ]


def test_foreign_currency_has_lower_ceiling() -> None:
    result = validate_price(Decimal(20_000), currency=Currency.USD)

    assert [w.message for w in result.warnings] == [
        "Very high price for USD currency, please verify"
    ]
    assert validate_price(Decimal(20_000), currency=Currency.MAD).warnings == ()


def test_high_order_total_warns() -> None:
    result = validate_price(Decimal(60_000), quantity=20)

    assert result.is_valid
    assert [w.message for w in result.warnings] == [
        "Total order value is very high, please verify"
    ]
    assert result.warnings[0].value == Decimal(1_200_000)


def test_missing_date_is_required() -> None:
    result = validate_date(None, today=TODAY)

    assert _codes(result.errors) == [IssueCode.REQUIRED_FIELD_MISSING]


@pytest.mark.parametrize("raw", ["yesterday", "31/02/2024", "2024-13-01"])
def test_unparseable_date_is_invalid_format(raw: str) -> None:
    result = validate_date(raw, today=TODAY)

    assert _codes(result.errors) == [IssueCode.INVALID_FORMAT]


@pytest.mark.parametrize(
    "raw",
    ["2024-03-15", "2024-03-15T09:00:00Z", "15/03/2024", "15-03-2024", "15.03.2024", "2024/03/15"],
)
def test_supported_date_formats(raw: str) -> None:
    result = validate_date(raw, today=TODAY)

    assert result.is_valid
    assert result.warnings == ()


def test_old_and_future_dates_warn() -> None:
    old = validate_date("2023-03-14", today=TODAY)
    future = validate_date("2024-04-16", today=TODAY)

    assert [w.message for w in old.warnings] == ["Order date is more than a year old"]
    assert [w.message for w in future.warnings] == ["Order date is far in the future"]
    assert validate_date("2023-03-15", today=TODAY).warnings == ()
    assert validate_date("2024-04-15", today=TODAY).warnings == ()


def test_customer_name_bounds() -> None:
    assert _codes(validate_required_text("", CUSTOMER_NAME_RULE).errors) == [
        IssueCode.REQUIRED_FIELD_MISSING
    ]
    assert _codes(validate_required_text(" A ", CUSTOMER_NAME_RULE).errors) == [
        IssueCode.INVALID_LENGTH
    ]
    assert _codes(validate_required_text("x" * 101, CUSTOMER_NAME_RULE).errors) == [
        IssueCode.INVALID_LENGTH
    ]
    assert validate_required_text("Ahmed Benali", CUSTOMER_NAME_RULE).is_valid


def test_short_address_is_a_warning() -> None:
    result = validate_required_text("Rue", ADDRESS_RULE)

    assert result.is_valid
    assert [w.message for w in result.warnings] == ["Address seems too short, please verify"]


def test_long_address_is_an_error() -> None:
    result = validate_required_text("x" * 501, ADDRESS_RULE)

    assert _codes(result.errors) == [IssueCode.INVALID_LENGTH]


def test_city_requires_two_characters() -> None:
    assert not validate_required_text("C", CITY_RULE).is_valid
    assert validate_required_text("Fes", CITY_RULE).is_valid


def test_invalid_email_is_only_a_warning() -> None:
    result = validate_email("ahmed@invalid")

    assert result.is_valid
    assert _codes(result.warnings) == [IssueCode.INVALID_FORMAT]
    assert validate_email("ahmed@example.ma").warnings == ()
    assert validate_email(None).warnings == ()


@pytest.mark.parametrize("quantity", [None, 0, -3])
def test_quantity_below_one_is_an_error(quantity: int | None) -> None:
    result = validate_quantity(quantity)

    assert _codes(result.errors) == [IssueCode.INVALID_VALUE]
    assert result.errors[0].field == "productQuantity"


def test_large_quantity_warns() -> None:
    result = validate_quantity(1001)

    assert result.is_valid
    assert _codes(result.warnings) == [IssueCode.SUSPICIOUS_VALUE]
