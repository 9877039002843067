"""Domain model for spreadsheet order ingestion."""

from __future__ import annotations

from .entities import (
    Customer,
    Entity,
    Order,
    OrderItem,
    PlatformConnection,
    Product,
    Store,
    new_id,
)
from .enums import (
    Currency,
    DuplicateClassification,
    DuplicateStage,
    FeedbackStatus,
    IssueCode,
    Locale,
    OrderStatus,
    PaymentMethod,
    PhoneFormat,
    SyncErrorType,
)
from .outcomes import DuplicateVerdict, IngestionOutcome, SyncError
from .rows import RawOrderRow
from .validation import (
    IssueCollector,
    ProductSuggestion,
    ProductValidationResult,
    ResolvedProduct,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "Currency",
    "Customer",
    "DuplicateClassification",
    "DuplicateStage",
    "DuplicateVerdict",
    "Entity",
    "FeedbackStatus",
    "IngestionOutcome",
    "IssueCode",
    "IssueCollector",
    "Locale",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "PhoneFormat",
    "PlatformConnection",
    "Product",
    "ProductSuggestion",
    "ProductValidationResult",
    "RawOrderRow",
    "ResolvedProduct",
    "Store",
    "SyncError",
    "SyncErrorType",
    "ValidationIssue",
    "ValidationResult",
    "new_id",
]
