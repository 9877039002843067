"""Run every field and catalog check for one row, in a fixed order."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sheetorders.domain.dates import utcnow
from sheetorders.domain.model import Currency, IssueCollector, PhoneFormat
from sheetorders.domain.validation.fields import (
    ADDRESS_RULE,
    CITY_RULE,
    CUSTOMER_NAME_RULE,
    validate_date,
    validate_email,
    validate_phone,
    validate_price,
    validate_quantity,
    validate_required_text,
)

if TYPE_CHECKING:
    from uuid import UUID

    from sheetorders.domain.dates import Clock
    from sheetorders.domain.model import RawOrderRow, ValidationResult
    from sheetorders.domain.ports import OrderUnitOfWork
    from sheetorders.domain.resolution import EntityResolver

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ValidationRules:
    require_phone: bool = True
    require_product: bool = True
    require_price: bool = True
    phone_format: PhoneFormat = PhoneFormat.MOROCCO
    price_validation: bool = True


DEFAULT_RULES = ValidationRules()


class ValidationOrchestrator:
    def __init__(self, resolver: EntityResolver, *, clock: Clock = utcnow) -> None:
        self.resolver = resolver
        self._clock = clock

    def validate(
        self,
        uow: OrderUnitOfWork,
        row: RawOrderRow,
        organization_id: UUID,
        rules: ValidationRules | None = None,
    ) -> ValidationResult:
        """Validate ``row`` including the catalog lookup for its product."""

        active = rules or DEFAULT_RULES
        issues = IssueCollector()
        self._check_contact(issues, row, active)
        if active.require_product:
            product_result = self.resolver.validate_product(uow, row, organization_id)
            issues.extend(product_result.as_validation_result())
        self._check_price_and_dates(issues, row, active)
        return self._finish(issues, row)

    def validate_fields(
        self, row: RawOrderRow, rules: ValidationRules | None = None
    ) -> ValidationResult:
        """Store-free subset of :meth:`validate`; product checks stop at the quantity."""

        active = rules or DEFAULT_RULES
        issues = IssueCollector()
        self._check_contact(issues, row, active)
        if active.require_product:
            issues.extend(validate_quantity(row.quantity))
        self._check_price_and_dates(issues, row, active)
        return self._finish(issues, row)

    @staticmethod
    def _check_contact(issues: IssueCollector, row: RawOrderRow, rules: ValidationRules) -> None:
        issues.extend(validate_required_text(row.customer_name, CUSTOMER_NAME_RULE))
        issues.extend(validate_required_text(row.address, ADDRESS_RULE))
        issues.extend(validate_required_text(row.city, CITY_RULE))
        if rules.require_phone:
            issues.extend(validate_phone(row.phone, rules.phone_format))

    def _check_price_and_dates(
        self, issues: IssueCollector, row: RawOrderRow, rules: ValidationRules
    ) -> None:
        if rules.require_price and rules.price_validation:
            issues.extend(validate_price(row.unit_price, row.quantity, Currency.MAD))
        issues.extend(validate_date(row.date, today=self._clock().date()))
        if row.email:
            issues.extend(validate_email(row.email))

    @staticmethod
    def _finish(issues: IssueCollector, row: RawOrderRow) -> ValidationResult:
        result = issues.result()
        log.debug(
            "Validation completed for row %s: valid=%s errors=%d warnings=%d",
            row.row_number,
            result.is_valid,
            len(result.errors),
            len(result.warnings),
        )
        return result


__all__ = ["DEFAULT_RULES", "ValidationOrchestrator", "ValidationRules"]
