"""Row validation: pure field validators and the orchestrator that runs them."""

from __future__ import annotations

from sheetorders.domain.normalization import canonical_phone

from .fields import (
    ADDRESS_RULE,
    CITY_RULE,
    CUSTOMER_NAME_RULE,
    TextRule,
    validate_date,
    validate_email,
    validate_phone,
    validate_price,
    validate_quantity,
    validate_required_text,
)
from .orchestrator import DEFAULT_RULES, ValidationOrchestrator, ValidationRules

__all__ = [
    "ADDRESS_RULE",
    "CITY_RULE",
    "CUSTOMER_NAME_RULE",
    "DEFAULT_RULES",
    "TextRule",
    "ValidationOrchestrator",
    "ValidationRules",
    "canonical_phone",
    "validate_date",
    "validate_email",
    "validate_phone",
    "validate_price",
    "validate_quantity",
    "validate_required_text",
]
