"""Localized per-row feedback for the sheet owner."""

from __future__ import annotations

from .formatter import (
    FeedbackFormatter,
    RowFeedback,
    SheetFeedback,
    ValidationSummary,
    analyze_error_patterns,
    convert_to_sync_errors,
    interpolate,
    sync_error_type,
)

__all__ = [
    "FeedbackFormatter",
    "RowFeedback",
    "SheetFeedback",
    "ValidationSummary",
    "analyze_error_patterns",
    "convert_to_sync_errors",
    "interpolate",
    "sync_error_type",
]
