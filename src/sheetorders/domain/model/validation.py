"""Validation results as plain data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from decimal import Decimal
    from uuid import UUID

    from sheetorders.domain.model.enums import Currency, IssueCode


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    field: str
    code: IssueCode
    message: str
    value: object = None
    suggested_fix: str | None = None


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Errors block order creation, warnings never do."""

    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def __add__(self, other: ValidationResult) -> ValidationResult:
        return ValidationResult(
            errors=(*self.errors, *other.errors),
            warnings=(*self.warnings, *other.warnings),
        )

    @classmethod
    def combine(cls, *results: ValidationResult) -> ValidationResult:
        combined = cls()
        for result in results:
            combined = combined + result
        return combined


class IssueCollector:
    """Mutable accumulator used while a validator runs."""

    __slots__ = ("errors", "warnings")

    def __init__(self) -> None:
        self.errors: list[ValidationIssue] = []
        self.warnings: list[ValidationIssue] = []

    def error(
        self,
        field: str,
        code: IssueCode,
        message: str,
        value: object = None,
        suggested_fix: str | None = None,
    ) -> None:
        self.errors.append(ValidationIssue(field, code, message, value, suggested_fix))

    def warning(
        self,
        field: str,
        code: IssueCode,
        message: str,
        value: object = None,
        suggested_fix: str | None = None,
    ) -> None:
        self.warnings.append(ValidationIssue(field, code, message, value, suggested_fix))

    def extend(self, result: ValidationResult) -> None:
        self.errors.extend(result.errors)
        self.warnings.extend(result.warnings)

    def result(self) -> ValidationResult:
        return ValidationResult(errors=tuple(self.errors), warnings=tuple(self.warnings))


@dataclass(frozen=True, slots=True)
class ResolvedProduct:
    id: UUID
    name: str
    sku: str | None
    catalog_price: Decimal
    currency: Currency


@dataclass(frozen=True, slots=True)
class ProductSuggestion:
    id: UUID
    name: str
    sku: str | None
    similarity: float


@dataclass(frozen=True, slots=True)
class ProductValidationResult(ValidationResult):
    product: ResolvedProduct | None = None
    suggestions: tuple[ProductSuggestion, ...] = ()

    def as_validation_result(self) -> ValidationResult:
        return ValidationResult(errors=self.errors, warnings=self.warnings)
