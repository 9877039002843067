from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest

from sheetorders.config.ingest import IngestSettings
from sheetorders.domain.duplicates import NEW_ORDER, DuplicateDetector
from sheetorders.domain.model import (
    Customer,
    DuplicateClassification,
    DuplicateStage,
    DuplicateVerdict,
    Product,
    Store,
)
from tests.support.fakes import FakeUnitOfWork, InMemoryCatalog
from tests.support.rows import (
    ORGANIZATION_ID,
    TODAY,
    fixed_clock,
    make_customer,
    make_order,
    make_product,
    make_row,
)

type Seeded = tuple[Customer, Product, Store]


@pytest.fixture
def seeded(catalog: InMemoryCatalog) -> Seeded:
    customer, product = make_customer(), make_product()
    catalog.customers.append(customer)
    catalog.products.append(product)
    return customer, product, catalog.stores[0]


@pytest.fixture
def detector() -> DuplicateDetector:
    return DuplicateDetector(clock=fixed_clock)


def _detect(
    detector: DuplicateDetector,
    catalog: InMemoryCatalog,
    product: Product,
    **row_overrides: object,
) -> DuplicateVerdict:
    force_resync = bool(row_overrides.pop("force_resync", False))
    with FakeUnitOfWork(catalog) as uow:
        return detector.detect(
            uow,
            make_row(**row_overrides),
            organization_id=ORGANIZATION_ID,
            product_id=product.id,
            force_resync=force_resync,
        )


def test_linked_row_is_skipped(
    detector: DuplicateDetector, catalog: InMemoryCatalog, seeded: Seeded
) -> None:
    verdict = _detect(detector, catalog, seeded[1], order_id="GS202403100004")

    assert verdict.classification is DuplicateClassification.SKIP
    assert verdict.stage is DuplicateStage.LINKED
    assert "already linked" in verdict.reason


def test_force_resync_ignores_the_link(
    detector: DuplicateDetector, catalog: InMemoryCatalog, seeded: Seeded
) -> None:
    verdict = _detect(detector, catalog, seeded[1], order_id="GS202403100004", force_resync=True)

    assert verdict is NEW_ORDER


def test_exact_duplicate_is_skipped(
    detector: DuplicateDetector, catalog: InMemoryCatalog, seeded: Seeded
) -> None:
    existing = make_order(*seeded)
    catalog.orders.append(existing)

    verdict = _detect(detector, catalog, seeded[1], address="  12 rue hassan ii ")

    assert verdict.classification is DuplicateClassification.SKIP
    assert verdict.stage is DuplicateStage.EXACT
    assert verdict.matched_order_id == existing.id
    assert verdict.reason == "Exact duplicate found: Order GS202403150001"
    assert "duplicate found" in verdict.reason.lower()


def test_similar_same_day_order_is_flagged(
    detector: DuplicateDetector, catalog: InMemoryCatalog, seeded: Seeded
) -> None:
    catalog.orders.append(make_order(*seeded))

    verdict = _detect(
        detector, catalog, seeded[1], address="12 Rue Hassan 2", unit_price=Decimal(160)
    )

    assert verdict.classification is DuplicateClassification.FLAG
    assert verdict.stage is DuplicateStage.SAME_DAY
    assert verdict.similarity == pytest.approx(0.971875)
    assert verdict.conflicting_fields == ("price",)
    assert verdict.reason == "Potential duplicate found: Order GS202403150001 (97% match)"
    assert verdict.notes.splitlines() == [
        "Potential duplicate of Order GS202403150001 (97% similarity).",
        "Existing order: Ahmed Benali - +212687654321 - Fri Mar 15 2024",
        "Sheet order: Ahmed Benali - 0687654321 - 2024-03-15",
        "Conflicting fields: price",
        "Detection type: same_day",
        "Detected at: 2024-03-15T10:30:00+00:00",
    ]


def test_neighbouring_day_order_is_flagged(
    detector: DuplicateDetector, catalog: InMemoryCatalog, seeded: Seeded
) -> None:
    catalog.orders.append(make_order(*seeded, order_date=TODAY - timedelta(days=1)))

    verdict = _detect(detector, catalog, seeded[1])

    assert verdict.classification is DuplicateClassification.FLAG
    assert verdict.stage is DuplicateStage.EXTENDED_WINDOW
    assert verdict.reason == "Potential duplicate found: Order GS202403150001 (100% match)"


def test_extended_window_can_be_disabled(catalog: InMemoryCatalog, seeded: Seeded) -> None:
    catalog.orders.append(make_order(*seeded, order_date=TODAY - timedelta(days=1)))
    detector = DuplicateDetector(IngestSettings(extended_window_days=0), clock=fixed_clock)

    assert _detect(detector, catalog, seeded[1]) is NEW_ORDER


def test_orders_outside_the_window_are_ignored(
    detector: DuplicateDetector, catalog: InMemoryCatalog, seeded: Seeded
) -> None:
    catalog.orders.append(make_order(*seeded, order_date=TODAY - timedelta(days=2)))

    assert _detect(detector, catalog, seeded[1]) is NEW_ORDER


def test_different_customer_is_a_new_order(
    detector: DuplicateDetector, catalog: InMemoryCatalog, seeded: Seeded
) -> None:
    catalog.orders.append(make_order(*seeded))

    verdict = _detect(
        detector,
        catalog,
        seeded[1],
        customer_name="Youssef Amrani",
        phone="0661234567",
        address="Avenue Mohammed V",
    )

    assert verdict is NEW_ORDER


def test_ties_keep_the_first_candidate(
    detector: DuplicateDetector, catalog: InMemoryCatalog, seeded: Seeded
) -> None:
    first = make_order(*seeded, shipping_address="12 Rue Hassan II, Maarif")
    second = make_order(
        *seeded, order_number="GS202403150002", shipping_address="12 Rue Hassan II, Maarif"
    )
    catalog.orders.extend([first, second])

    verdicts = {_detect(detector, catalog, seeded[1]).matched_order_id for _ in range(3)}

    assert verdicts == {first.id}
