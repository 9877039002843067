"""Text and phone normalization shared by lookup and duplicate matching."""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sheetorders.domain.model.rows import RawPrice

MOROCCO_COUNTRY_CODE = "212"
_NON_PHONE = re.compile(r"[^\d+]")
_WHITESPACE = re.compile(r"\s+")
_MOROCCAN_LOCAL = re.compile(r"^[567]\d{8}$")


def clean_phone(raw: str | None) -> str:
    """Keep only digits and ``+``."""

    if not raw:
        return ""
    return _NON_PHONE.sub("", raw)


def moroccan_local_part(cleaned: str) -> str:
    """Strip ``+212``, ``212`` or a trunk ``0`` from a cleaned phone number."""

    if cleaned.startswith("+" + MOROCCO_COUNTRY_CODE):
        return cleaned[len(MOROCCO_COUNTRY_CODE) + 1 :]
    if cleaned.startswith(MOROCCO_COUNTRY_CODE):
        return cleaned[len(MOROCCO_COUNTRY_CODE) :]
    if cleaned.startswith("0"):
        return cleaned[1:]
    return cleaned


def canonical_phone(raw: str | None) -> str | None:
    """Return ``+212XXXXXXXXX`` for Moroccan mobiles, the cleaned value otherwise.

    ``None`` means the input carries no digits at all.
    """

    cleaned = clean_phone(raw)
    if not any(char.isdigit() for char in cleaned):
        return None
    local = moroccan_local_part(cleaned)
    if _MOROCCAN_LOCAL.match(local):
        return f"+{MOROCCO_COUNTRY_CODE}{local}"
    return cleaned


def phone_digits(raw: str | None) -> str:
    canonical = canonical_phone(raw)
    if canonical is None:
        return ""
    return canonical.lstrip("+")


def normalize_text(value: str | None) -> str:
    """Trim, collapse inner whitespace and lower-case."""

    if not value:
        return ""
    return _WHITESPACE.sub(" ", value.strip()).lower()


def product_name_key(name: str | None) -> str:
    """Case-folded catalog name used for exact product lookups and uniqueness."""

    return normalize_text(name).casefold()


def split_customer_name(full_name: str) -> tuple[str, str]:
    """Split a sheet name into first name and the rest."""

    parts = full_name.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def coerce_price(price: RawPrice) -> Decimal | None:
    """Return a finite ``Decimal`` for numeric input, ``None`` otherwise.

    Floats go through ``str`` so ``99.999`` keeps its written digits.
    """

    if price is None or isinstance(price, bool):
        return None
    if isinstance(price, float):
        if not math.isfinite(price):
            return None
        return Decimal(str(price))
    if isinstance(price, int):
        return Decimal(price)
    if isinstance(price, Decimal):
        return price if price.is_finite() else None
    try:
        value = Decimal(price.strip())
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def decimal_places(value: Decimal) -> int:
    exponent = value.normalize().as_tuple().exponent
    if not isinstance(exponent, int):
        return 0
    return max(0, -exponent)
