"""Turn validation results and row outcomes into sheet-ready feedback."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from sheetorders.domain.feedback.locales import (
    DEFAULT_ERROR,
    DEFAULT_WARNING,
    ERROR_MESSAGES,
    SUMMARY_MESSAGES,
    VALIDATION_SUMMARY,
    WARNING_MESSAGES,
    field_name,
    messages_for,
)
from sheetorders.domain.model import (
    FeedbackStatus,
    IssueCode,
    Locale,
    SyncError,
    SyncErrorType,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from uuid import UUID

    from sheetorders.domain.model import (
        IngestionOutcome,
        RawOrderRow,
        ValidationIssue,
        ValidationResult,
    )

log = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH: Final = 500
MESSAGE_SEPARATOR: Final = "; "
ELLIPSIS: Final = "..."

_SYNC_ERROR_TYPES: Final = {
    IssueCode.PRODUCT_NOT_FOUND: SyncErrorType.PRODUCT_NOT_FOUND,
    IssueCode.VALIDATION_ERROR: SyncErrorType.SYSTEM,
}


@dataclass(frozen=True, slots=True)
class SheetFeedback:
    status: FeedbackStatus
    has_errors: bool
    has_warnings: bool
    error_message: str


@dataclass(frozen=True, slots=True)
class RowFeedback:
    """What the feedback sink writes back next to a row."""

    row_number: int
    status: FeedbackStatus
    error_message: str


@dataclass(frozen=True, slots=True)
class ValidationSummary:
    total_rows: int
    valid_rows: int
    error_rows: int
    warning_rows: int
    summary: str
    details: tuple[RowFeedback, ...] = ()


def interpolate(template: str, values: Mapping[str, object]) -> str:
    """Replace ``{name}`` placeholders; falsy values render as empty text."""

    rendered = template
    for key, value in values.items():
        rendered = rendered.replace(f"{{{key}}}", str(value) if value else "")
    return rendered


def sync_error_type(code: IssueCode) -> SyncErrorType:
    return _SYNC_ERROR_TYPES.get(code, SyncErrorType.VALIDATION)


def convert_to_sync_errors(result: ValidationResult, row_number: int) -> list[SyncError]:
    """One ``SyncError`` per validation error; warnings are not sync errors."""

    return [
        SyncError(
            row_number=row_number,
            error_type=sync_error_type(error.code),
            error_message=error.message,
            field=error.field,
            suggested_fix=error.suggested_fix,
        )
        for error in result.errors
    ]


def analyze_error_patterns(results: Iterable[ValidationResult]) -> dict[str, int]:
    """Count errors by ``<field>_<code>``."""

    patterns: Counter[str] = Counter()
    for result in results:
        patterns.update(f"{error.field}_{error.code}" for error in result.errors)
    return dict(patterns)


class FeedbackFormatter:
    def __init__(self, max_length: int = DEFAULT_MAX_LENGTH) -> None:
        self.max_length = max_length

    def format_for_sheet(
        self,
        result: ValidationResult,
        row_number: int,
        locale: str | Locale = Locale.EN,
    ) -> SheetFeedback:
        resolved = Locale.resolve(locale)
        has_errors = bool(result.errors)
        has_warnings = bool(result.warnings)

        if has_errors:
            status = FeedbackStatus.ERROR
            message = MESSAGE_SEPARATOR.join(
                self.format_error(error, resolved) for error in result.errors
            )
        elif has_warnings:
            status = FeedbackStatus.WARNING
            message = MESSAGE_SEPARATOR.join(
                self.format_warning(warning, resolved) for warning in result.warnings
            )
        else:
            status = FeedbackStatus.VALID
            message = ""

        message = self.truncate(message)
        log.debug(
            "Formatted feedback for row %s: status=%s length=%d",
            row_number,
            status,
            len(message),
        )
        return SheetFeedback(
            status=status,
            has_errors=has_errors,
            has_warnings=has_warnings,
            error_message=message,
        )

    def format_error(self, error: ValidationIssue, locale: str | Locale = Locale.EN) -> str:
        resolved = Locale.resolve(locale)
        messages = messages_for(ERROR_MESSAGES, resolved)
        template = messages.get(error.code, messages[DEFAULT_ERROR])
        return self._render(template, error, resolved)

    def format_warning(self, warning: ValidationIssue, locale: str | Locale = Locale.EN) -> str:
        resolved = Locale.resolve(locale)
        messages = messages_for(WARNING_MESSAGES, resolved)
        template = messages.get(warning.code, messages[DEFAULT_WARNING])
        return self._render(template, warning, resolved)

    def truncate(self, message: str) -> str:
        if len(message) <= self.max_length:
            return message
        return message[: self.max_length - len(ELLIPSIS)] + ELLIPSIS

    def create_validation_summary(
        self,
        results: Iterable[tuple[int, ValidationResult]],
        locale: str | Locale = Locale.EN,
    ) -> ValidationSummary:
        resolved = Locale.resolve(locale)
        counts: Counter[FeedbackStatus] = Counter()
        details: list[RowFeedback] = []
        for row_number, result in results:
            feedback = self.format_for_sheet(result, row_number, resolved)
            counts[feedback.status] += 1
            details.append(RowFeedback(row_number, feedback.status, feedback.error_message))

        totals = {
            "totalRows": len(details),
            "validRows": counts[FeedbackStatus.VALID],
            "errorRows": counts[FeedbackStatus.ERROR],
            "warningRows": counts[FeedbackStatus.WARNING],
        }
        # str() so that zero counts still render
        summary = interpolate(
            messages_for(SUMMARY_MESSAGES, resolved)[VALIDATION_SUMMARY],
            {key: str(value) for key, value in totals.items()},
        )
        return ValidationSummary(
            total_rows=totals["totalRows"],
            valid_rows=totals["validRows"],
            error_rows=totals["errorRows"],
            warning_rows=totals["warningRows"],
            summary=summary,
            details=tuple(details),
        )

    def convert_to_sync_errors(self, result: ValidationResult, row_number: int) -> list[SyncError]:
        return convert_to_sync_errors(result, row_number)

    def log_validation_errors(
        self,
        results: Sequence[tuple[RawOrderRow, ValidationResult]],
        connection_id: UUID | str,
        spreadsheet_id: str,
    ) -> None:
        failing = [(row, result) for row, result in results if result.errors]
        if not failing:
            return

        log.warning(
            "Validation errors detected (connection=%s, spreadsheet=%s, total_rows=%d, "
            "error_rows=%d, breakdown=%s)",
            connection_id,
            spreadsheet_id,
            len(results),
            len(failing),
            analyze_error_patterns(result for _, result in failing),
        )
        for row, result in failing:
            for error in result.errors:
                log.error(
                    "Validation error detail (connection=%s, spreadsheet=%s, row=%s, field=%s, "
                    "code=%s, message=%r, value=%r, suggested_fix=%r, customer=%r, phone=%r)",
                    connection_id,
                    spreadsheet_id,
                    row.row_number,
                    error.field,
                    error.code,
                    error.message,
                    error.value,
                    error.suggested_fix,
                    row.customer_name,
                    row.phone,
                )

    def row_feedback(
        self,
        outcome: IngestionOutcome,
        row_number: int,
        locale: str | Locale = Locale.EN,
    ) -> RowFeedback:
        """Project a pipeline outcome onto the tuple written back to the sheet.

        Rejected rows report their validation errors, system failures their raw
        message. Flagged orders become warnings carrying the duplicate reason.
        """

        if outcome.validation_result is not None and not outcome.validation_result.is_valid:
            feedback = self.format_for_sheet(outcome.validation_result, row_number, locale)
            return RowFeedback(row_number, feedback.status, feedback.error_message)
        if outcome.error is not None:
            return RowFeedback(
                row_number, FeedbackStatus.ERROR, self.truncate(outcome.error.error_message)
            )

        parts: list[str] = []
        status = FeedbackStatus.VALID
        if outcome.validation_result is not None:
            feedback = self.format_for_sheet(outcome.validation_result, row_number, locale)
            status = feedback.status
            if feedback.error_message:
                parts.append(feedback.error_message)
        if outcome.flagged:
            status = FeedbackStatus.WARNING
        if outcome.reason and (outcome.flagged or outcome.skipped):
            parts.insert(0, outcome.reason)
        return RowFeedback(row_number, status, self.truncate(MESSAGE_SEPARATOR.join(parts)))

    @staticmethod
    def _render(template: str, issue: ValidationIssue, locale: Locale) -> str:
        return interpolate(
            template,
            {
                "field": field_name(issue.field, locale),
                "value": issue.value,
                "message": issue.message,
                "suggestion": issue.suggested_fix,
            },
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
