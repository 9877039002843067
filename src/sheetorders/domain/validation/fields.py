"""Pure per-field validators.

Every function here is deterministic and store-free: it takes raw sheet values and
returns a ``ValidationResult``. Nothing raises for bad input.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Final

from sheetorders.domain.dates import parse_order_date, shift_months, shift_years
from sheetorders.domain.model import (
    Currency,
    IssueCode,
    IssueCollector,
    PhoneFormat,
    ValidationResult,
)
from sheetorders.domain.normalization import (
    clean_phone,
    coerce_price,
    decimal_places,
    moroccan_local_part,
)

if TYPE_CHECKING:
    from datetime import date

    from sheetorders.domain.model.rows import RawPrice

PHONE_MIN_DIGITS: Final = 7
PHONE_MAX_DIGITS: Final = 15
QUANTITY_MIN: Final = 1
QUANTITY_SUSPICIOUS_ABOVE: Final = 1000

MAD_SUSPICIOUS_ABOVE: Final = Decimal(100_000)
FOREIGN_SUSPICIOUS_ABOVE: Final = Decimal(10_000)
ORDER_TOTAL_SUSPICIOUS_ABOVE: Final = Decimal(1_000_000)
PRICE_MAX_DECIMALS: Final = 2

_MOROCCO_LOCAL: Final = re.compile(r"^[567]\d{8}$")
_INTERNATIONAL: Final = re.compile(r"^\+[1-9]\d{6,14}$")
_ANY_PHONE: Final = re.compile(r"^(\+?[1-9]\d{6,14}|0\d{8,9})$")
_REPEATED_DIGITS: Final = re.compile(r"(\d)\1{6,}")
_ASCENDING_RUN: Final = re.compile(r"012345|123456|234567|345678|456789|567890")
_TEST_NUMBERS: Final = ("1111111111", "0000000000", "1234567890")
_EMAIL: Final = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


# --- phone -----------------------------------------------------------------


def is_valid_morocco_phone(cleaned: str) -> bool:
    return bool(_MOROCCO_LOCAL.match(moroccan_local_part(cleaned)))


def is_suspicious_phone(cleaned: str) -> bool:
    digits = "".join(char for char in cleaned if char.isdigit())
    if _REPEATED_DIGITS.search(digits) or _ASCENDING_RUN.search(digits):
        return True
    return any(test in digits for test in _TEST_NUMBERS)


def validate_phone(
    raw: str | None, phone_format: PhoneFormat = PhoneFormat.MOROCCO
) -> ValidationResult:
    issues = IssueCollector()
    if raw is None or not raw.strip():
        issues.error(
            "phone",
            IssueCode.REQUIRED_FIELD_MISSING,
            "Phone number is required",
            raw,
            "Enter a valid phone number",
        )
        return issues.result()

    cleaned = clean_phone(raw)
    digit_count = sum(char.isdigit() for char in cleaned)
    if digit_count == 0:
        issues.error(
            "phone",
            IssueCode.INVALID_FORMAT,
            "Phone number contains invalid characters",
            raw,
            "Use only digits, +, -, (, ), and spaces",
        )
        return issues.result()

    if digit_count < PHONE_MIN_DIGITS:
        issues.error(
            "phone",
            IssueCode.INVALID_LENGTH,
            "Phone number is too short",
            raw,
            "Enter a complete phone number",
        )
    if digit_count > PHONE_MAX_DIGITS:
        issues.error(
            "phone",
            IssueCode.INVALID_LENGTH,
            "Phone number is too long",
            raw,
            "Remove extra digits from phone number",
        )

    match phone_format:
        case PhoneFormat.MOROCCO:
            if not is_valid_morocco_phone(cleaned):
                issues.error(
                    "phone",
                    IssueCode.INVALID_FORMAT,
                    "Invalid Morocco phone number format",
                    raw,
                    "Use format: +212XXXXXXXXX or 0XXXXXXXXX",
                )
        case PhoneFormat.INTERNATIONAL:
            if not _INTERNATIONAL.match(cleaned):
                issues.error(
                    "phone",
                    IssueCode.INVALID_FORMAT,
                    "Invalid international phone number format",
                    raw,
                    "Use international format: +[country code][number]",
                )
        case PhoneFormat.ANY:
            if not _ANY_PHONE.match(cleaned):
                issues.error(
                    "phone",
                    IssueCode.INVALID_FORMAT,
                    "Invalid phone number format",
                    raw,
                    "Enter a valid phone number",
                )

    if is_suspicious_phone(cleaned):
        issues.warning(
            "phone",
            IssueCode.SUSPICIOUS_VALUE,
            "Phone number appears suspicious, please verify",
            raw,
            "Double-check the phone number with customer",
        )
    return issues.result()


# --- price -----------------------------------------------------------------


def _is_missing_price(price: RawPrice) -> bool:
    return price is None or (isinstance(price, str) and not price.strip())


def validate_price(
    price: RawPrice,
    quantity: int | None = 1,
    currency: Currency = Currency.MAD,
) -> ValidationResult:
    issues = IssueCollector()
    if _is_missing_price(price):
        issues.error(
            "price",
            IssueCode.REQUIRED_FIELD_MISSING,
            "Price is required",
            price,
            "Enter a valid price",
        )
        return issues.result()

    value = coerce_price(price)
    if value is None:
        issues.error(
            "price",
            IssueCode.INVALID_TYPE,
            "Price must be a valid number",
            price,
            "Enter a numeric price value",
        )
        return issues.result()

    if value < 0:
        issues.error(
            "price",
            IssueCode.INVALID_VALUE,
            "Price cannot be negative",
            price,
            "Enter a positive price value",
        )
    if value == 0:
        issues.warning(
            "price",
            IssueCode.SUSPICIOUS_VALUE,
            "Price is zero, please verify",
            price,
            "Confirm if this is a free product",
        )

    if currency is Currency.MAD:
        if value > MAD_SUSPICIOUS_ABOVE:
            issues.warning(
                "price",
                IssueCode.SUSPICIOUS_VALUE,
                "Very high price for MAD currency, please verify",
                price,
                "Confirm the price is correct",
            )
        if 0 < value < 1:
            issues.warning(
                "price",
                IssueCode.SUSPICIOUS_VALUE,
                "Price less than 1 MAD, please verify",
                price,
                "Confirm the price is in MAD",
            )
    elif value > FOREIGN_SUSPICIOUS_ABOVE:
        issues.warning(
            "price",
            IssueCode.SUSPICIOUS_VALUE,
            f"Very high price for {currency} currency, please verify",
            price,
            "Confirm the price is correct",
        )

    if decimal_places(value) > PRICE_MAX_DECIMALS:
        issues.warning(
            "price",
            IssueCode.PRECISION_WARNING,
            "Price has more than 2 decimal places",
            price,
            "Round to 2 decimal places",
        )

    total = value * (quantity if quantity is not None else 1)
    if total > ORDER_TOTAL_SUSPICIOUS_ABOVE:
        issues.warning(
            "price",
            IssueCode.SUSPICIOUS_VALUE,
            "Total order value is very high, please verify",
            total,
            "Confirm the total amount with customer",
        )
    return issues.result()


# --- date ------------------------------------------------------------------


def validate_date(raw: str | None, *, today: date) -> ValidationResult:
    issues = IssueCollector()
    if raw is None or not raw.strip():
        issues.error(
            "date",
            IssueCode.REQUIRED_FIELD_MISSING,
            "Order date is required",
            raw,
            "Enter a valid date (YYYY-MM-DD format)",
        )
        return issues.result()

    order_date = parse_order_date(raw)
    if order_date is None:
        issues.error(
            "date",
            IssueCode.INVALID_FORMAT,
            "Invalid date format",
            raw,
            "Use YYYY-MM-DD format (e.g., 2024-01-15)",
        )
        return issues.result()

    if order_date < shift_years(today, -1):
        issues.warning(
            "date",
            IssueCode.SUSPICIOUS_VALUE,
            "Order date is more than a year old",
            raw,
            "Verify the order date is correct",
        )
    if order_date > shift_months(today, 1):
        issues.warning(
            "date",
            IssueCode.SUSPICIOUS_VALUE,
            "Order date is far in the future",
            raw,
            "Verify the order date is correct",
        )
    return issues.result()


# --- free text -------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TextRule:
    """Length bounds for a required text field.

    ``short_warning_below`` turns a short-but-present value into a warning
    instead of an error.
    """

    field: str
    label: str
    min_length: int | None = None
    max_length: int | None = None
    short_warning_below: int | None = None
    required_fix: str | None = None


CUSTOMER_NAME_RULE: Final = TextRule(
    field="customerName",
    label="Customer name",
    min_length=2,
    max_length=100,
    required_fix="Enter a valid customer name",
)
ADDRESS_RULE: Final = TextRule(
    field="address",
    label="Customer address",
    max_length=500,
    short_warning_below=5,
    required_fix="Enter a valid customer address",
)
CITY_RULE: Final = TextRule(
    field="city",
    label="Customer city",
    min_length=2,
    max_length=100,
    required_fix="Enter a valid city name",
)


def validate_required_text(value: str | None, rule: TextRule) -> ValidationResult:
    issues = IssueCollector()
    trimmed = value.strip() if value else ""
    if not trimmed:
        issues.error(
            rule.field,
            IssueCode.REQUIRED_FIELD_MISSING,
            f"{rule.label} is required",
            value,
            rule.required_fix,
        )
        return issues.result()

    if rule.min_length is not None and len(trimmed) < rule.min_length:
        issues.error(
            rule.field,
            IssueCode.INVALID_LENGTH,
            f"{rule.label} must be at least {rule.min_length} characters long",
            value,
            f"Enter a full {rule.label.lower()}",
        )
    elif rule.max_length is not None and len(trimmed) > rule.max_length:
        issues.error(
            rule.field,
            IssueCode.INVALID_LENGTH,
            f"{rule.label} is too long (maximum {rule.max_length} characters)",
            value,
            f"Shorten the {rule.label.lower()}",
        )
    elif rule.short_warning_below is not None and len(trimmed) < rule.short_warning_below:
        issues.warning(
            rule.field,
            IssueCode.SUSPICIOUS_VALUE,
            f"{rule.field.capitalize()} seems too short, please verify",
            value,
            f"Ensure the {rule.field} is complete",
        )
    return issues.result()


# --- optional fields -------------------------------------------------------


def validate_email(raw: str | None) -> ValidationResult:
    issues = IssueCollector()
    if raw and raw.strip() and not _EMAIL.match(raw.strip()):
        issues.warning(
            "email",
            IssueCode.INVALID_FORMAT,
            "Invalid email format",
            raw,
            "Correct the email format or leave empty",
        )
    return issues.result()


def validate_quantity(quantity: int | None) -> ValidationResult:
    issues = IssueCollector()
    if quantity is None or quantity < QUANTITY_MIN:
        issues.error(
            "productQuantity",
            IssueCode.INVALID_VALUE,
            "Product quantity must be at least 1",
            quantity,
            "Enter a valid quantity (minimum 1)",
        )
    elif quantity > QUANTITY_SUSPICIOUS_ABOVE:
        issues.warning(
            "productQuantity",
            IssueCode.SUSPICIOUS_VALUE,
            "Large quantity order, please verify",
            quantity,
            "Confirm the quantity with customer",
        )
    return issues.result()


__all__ = [
    "ADDRESS_RULE",
    "CITY_RULE",
    "CUSTOMER_NAME_RULE",
    "TextRule",
    "is_suspicious_phone",
    "is_valid_morocco_phone",
    "validate_date",
    "validate_email",
    "validate_phone",
    "validate_price",
    "validate_quantity",
    "validate_required_text",
]
