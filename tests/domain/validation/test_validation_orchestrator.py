from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sheetorders.config.ingest import IngestSettings
from sheetorders.domain.model import IssueCode
from sheetorders.domain.resolution import EntityResolver
from sheetorders.domain.validation import ValidationOrchestrator, ValidationRules
from tests.support.rows import ORGANIZATION_ID, fixed_clock, make_product, make_row

if TYPE_CHECKING:
    from collections.abc import Callable

    from tests.support.fakes import FakeUnitOfWork, InMemoryCatalog


def _orchestrator(settings: IngestSettings | None = None) -> ValidationOrchestrator:
    return ValidationOrchestrator(EntityResolver(settings, clock=fixed_clock), clock=fixed_clock)


def test_complete_row_with_known_product_is_clean(
    catalog: InMemoryCatalog, fake_unit_of_work: Callable[[], FakeUnitOfWork]
) -> None:
    catalog.products.append(make_product())

    with fake_unit_of_work() as uow:
        result = _orchestrator().validate(uow, make_row(), ORGANIZATION_ID)

    assert result.is_valid
    assert result.warnings == ()


def test_missing_customer_name_is_reported_first(
    fake_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    row = make_row(customer_name="", phone="0687654321", product_name="Argan Oil 100ml")

    with fake_unit_of_work() as uow:
        result = _orchestrator().validate(uow, row, ORGANIZATION_ID)

    assert not result.is_valid
    first = result.errors[0]
    assert first.field == "customerName"
    assert first.code is IssueCode.REQUIRED_FIELD_MISSING


def test_errors_follow_check_order(fake_unit_of_work: Callable[[], FakeUnitOfWork]) -> None:
    row = make_row(
        customer_name="",
        city="",
        phone="123",
        product_name="",
        unit_price=Decimal(-1),
        date="someday",
    )

    with fake_unit_of_work() as uow:
        result = _orchestrator().validate(uow, row, ORGANIZATION_ID)

    assert [error.field for error in result.errors] == [
        "customerName",
        "city",
        "phone",
        "phone",
        "productName",
        "price",
        "date",
    ]


def test_unknown_product_is_a_warning_when_auto_create_is_on(
    fake_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    with fake_unit_of_work() as uow:
        result = _orchestrator().validate(uow, make_row(), ORGANIZATION_ID)

    assert result.is_valid
    assert [w.code for w in result.warnings] == [IssueCode.PRODUCT_NOT_FOUND]


def test_unknown_product_is_an_error_when_auto_create_is_off(
    fake_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    settings = IngestSettings(auto_create_products=False)

    with fake_unit_of_work() as uow:
        result = _orchestrator(settings).validate(uow, make_row(), ORGANIZATION_ID)

    assert not result.is_valid
    assert [e.code for e in result.errors] == [IssueCode.PRODUCT_NOT_FOUND]


def test_rules_can_disable_phone_and_price_checks(
    catalog: InMemoryCatalog, fake_unit_of_work: Callable[[], FakeUnitOfWork]
) -> None:
    catalog.products.append(make_product())
    rules = ValidationRules(require_phone=False, require_price=False)
    row = make_row(phone="", unit_price=None)

    with fake_unit_of_work() as uow:
        result = _orchestrator().validate(uow, row, ORGANIZATION_ID, rules)

    assert result.is_valid


def test_invalid_email_never_blocks_the_row(
    catalog: InMemoryCatalog, fake_unit_of_work: Callable[[], FakeUnitOfWork]
) -> None:
    catalog.products.append(make_product())

    with fake_unit_of_work() as uow:
        result = _orchestrator().validate(uow, make_row(email="nope"), ORGANIZATION_ID)

    assert result.is_valid
    assert [(w.field, w.code) for w in result.warnings] == [("email", IssueCode.INVALID_FORMAT)]


def test_validate_fields_checks_quantity_without_the_store() -> None:
    result = _orchestrator().validate_fields(make_row(quantity=0))

    assert [(e.field, e.code) for e in result.errors] == [
        ("productQuantity", IssueCode.INVALID_VALUE)
    ]
