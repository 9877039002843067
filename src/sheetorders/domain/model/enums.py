"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Currency(StrEnum):
    MAD = "MAD"
    USD = "USD"
    EUR = "EUR"


class OrderStatus(StrEnum):
    NEW = "NEW"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentMethod(StrEnum):
    COD = "COD"


class PhoneFormat(StrEnum):
    MOROCCO = "morocco"
    INTERNATIONAL = "international"
    ANY = "any"


class IssueCode(StrEnum):
    """Closed set of codes shared by validation errors and warnings."""

    REQUIRED_FIELD_MISSING = "REQUIRED_FIELD_MISSING"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_LENGTH = "INVALID_LENGTH"
    INVALID_VALUE = "INVALID_VALUE"
    INVALID_TYPE = "INVALID_TYPE"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    NAME_MISMATCH = "NAME_MISMATCH"
    PRICE_MISMATCH = "PRICE_MISMATCH"
    PRECISION_WARNING = "PRECISION_WARNING"
    SUSPICIOUS_VALUE = "SUSPICIOUS_VALUE"
    VALIDATION_ERROR = "VALIDATION_ERROR"


class DuplicateClassification(StrEnum):
    NEW = "NEW"
    SKIP = "SKIP"
    FLAG = "FLAG"


class DuplicateStage(StrEnum):
    """Which search step produced a verdict."""

    LINKED = "linked"
    EXACT = "exact"
    SAME_DAY = "same_day"
    EXTENDED_WINDOW = "extended_window"
    NONE = "none"


class FeedbackStatus(StrEnum):
    VALID = "VALID"
    WARNING = "WARNING"
    ERROR = "ERROR"


class SyncErrorType(StrEnum):
    VALIDATION = "validation"
    PRODUCT_NOT_FOUND = "product_not_found"
    SYSTEM = "system"


class Locale(StrEnum):
    EN = "en"
    FR = "fr"
    AR = "ar"

    @classmethod
    def resolve(cls, code: str | Locale | None) -> Locale:
        """Return the matching locale, falling back to English for unknown codes."""

        if isinstance(code, Locale):
            return code
        if not code:
            return cls.EN
        normalized = code.strip().lower().replace("_", "-").split("-", 1)[0]
        try:
            return cls(normalized)
        except ValueError:
            return cls.EN
