from __future__ import annotations

from decimal import Decimal

from sheetorders.domain.model import (
    IssueCode,
    IssueCollector,
    Order,
    OrderItem,
    ValidationIssue,
    ValidationResult,
    new_id,
)
from tests.support.rows import ORGANIZATION_ID, TODAY, make_customer, make_store

WARNING = ValidationIssue(
    "price", IssueCode.PRECISION_WARNING, "Price has more than 2 decimal places"
)
ERROR = ValidationIssue("phone", IssueCode.REQUIRED_FIELD_MISSING, "Phone number is required")


def test_warnings_never_invalidate() -> None:
    assert ValidationResult(warnings=(WARNING,)).is_valid
    assert not ValidationResult(errors=(ERROR,)).is_valid


def test_combine_preserves_order() -> None:
    first = ValidationResult(warnings=(WARNING,))
    second = ValidationResult(errors=(ERROR,), warnings=(WARNING,))

    combined = ValidationResult.combine(first, second)

    assert combined.errors == (ERROR,)
    assert combined.warnings == (WARNING, WARNING)
    assert combined == first + second
    assert not combined.is_valid


def test_collector_builds_result() -> None:
    issues = IssueCollector()
    issues.warning("price", IssueCode.PRECISION_WARNING, "Price has more than 2 decimal places")
    issues.extend(ValidationResult(errors=(ERROR,)))

    assert issues.result() == ValidationResult(errors=(ERROR,), warnings=(WARNING,))


def test_order_items_point_back_to_their_order() -> None:
    customer, store = make_customer(), make_store()
    order = Order(
        order_number="GS202403150001",
        organization_id=ORGANIZATION_ID,
        customer_id=customer.id,
        store_id=store.id,
        order_date=TODAY,
        shipping_address="12 Rue Hassan II",
        shipping_city="Casablanca",
        shipping_phone=customer.phone,
        subtotal=Decimal(300),
        total=Decimal(300),
    )
    item = OrderItem(
        product_id=new_id(), quantity=2, unit_price=Decimal(150), total=Decimal(300)
    )

    order.add_item(item)

    assert item.order_id == order.id
    assert order.items == [item]
    assert customer.full_name == "Ahmed Benali"
