from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from sheetorders.config.ingest import IngestSettings
from sheetorders.domain.errors import (
    DuplicateEntityError,
    IngestError,
    RecordStoreError,
    StoreNotFoundError,
)
from sheetorders.domain.model import IssueCode
from sheetorders.domain.resolution import EntityResolver
from tests.support.fakes import FakeUnitOfWork
from tests.support.rows import (
    FIXED_NOW,
    ORGANIZATION_ID,
    OTHER_ORGANIZATION_ID,
    fixed_clock,
    make_customer,
    make_product,
    make_row,
)

if TYPE_CHECKING:
    from tests.support.fakes import InMemoryCatalog


@pytest.fixture
def resolver() -> EntityResolver:
    return EntityResolver(clock=fixed_clock)


def test_sku_match_with_divergent_name_warns(
    catalog: InMemoryCatalog, resolver: EntityResolver
) -> None:
    product = make_product(name="Argan Oil 100 ml")
    catalog.products.append(product)

    with FakeUnitOfWork(catalog) as uow:
        result = resolver.validate_product(uow, make_row(), ORGANIZATION_ID)

    assert result.is_valid
    assert result.product is not None
    assert result.product.id == product.id
    assert [w.code for w in result.warnings] == [IssueCode.NAME_MISMATCH]
    assert result.warnings[0].message == 'Product name mismatch. Found: "Argan Oil 100 ml"'


def test_name_match_is_case_insensitive(catalog: InMemoryCatalog, resolver: EntityResolver) -> None:
    catalog.products.append(make_product(sku=None, name="ARGAN OIL 100ML"))

    with FakeUnitOfWork(catalog) as uow:
        result = resolver.validate_product(uow, make_row(product_sku=None), ORGANIZATION_ID)

    assert result.product is not None
    assert result.warnings == ()


def test_price_far_from_catalog_warns(catalog: InMemoryCatalog, resolver: EntityResolver) -> None:
    catalog.products.append(make_product(price=Decimal(100)))

    with FakeUnitOfWork(catalog) as uow:
        result = resolver.validate_product(
            uow, make_row(unit_price=Decimal(130)), ORGANIZATION_ID
        )

    assert [w.code for w in result.warnings] == [IssueCode.PRICE_MISMATCH]
    assert result.warnings[0].message == "Price differs significantly from catalog (100 MAD)"


def test_price_within_variance_is_quiet(catalog: InMemoryCatalog, resolver: EntityResolver) -> None:
    catalog.products.append(make_product(price=Decimal(100)))

    with FakeUnitOfWork(catalog) as uow:
        result = resolver.validate_product(
            uow, make_row(unit_price=Decimal(120)), ORGANIZATION_ID
        )

    assert result.warnings == ()


def test_unknown_product_returns_ranked_suggestions(
    catalog: InMemoryCatalog, resolver: EntityResolver
) -> None:
    catalog.products.extend(
        [
            make_product(name="Argan Oil 50ml", sku="ARG-50"),
            make_product(name="Argan Oil 250ml", sku="ARG-250"),
            make_product(name="Black Soap", sku="SAV-1"),
        ]
    )
    row = make_row(product_name="Argan Oil 25ml", product_sku=None)

    with FakeUnitOfWork(catalog) as uow:
        result = resolver.validate_product(uow, row, ORGANIZATION_ID)

    assert result.is_valid
    assert result.product is None
    assert [s.name for s in result.suggestions] == ["Argan Oil 250ml", "Argan Oil 50ml"]
    assert result.suggestions[0].similarity > result.suggestions[1].similarity
    assert result.warnings[0].message == "Product not found. Found 2 similar products"


def test_suggestions_are_capped(catalog: InMemoryCatalog) -> None:
    catalog.products.extend(
        make_product(name=f"Argan Oil {size}ml", sku=f"ARG-{size}") for size in range(10, 90, 10)
    )
    resolver = EntityResolver(IngestSettings(suggestion_limit=3), clock=fixed_clock)

    with FakeUnitOfWork(catalog) as uow:
        suggestions = resolver.find_similar_products(uow, ORGANIZATION_ID, "Argan Oil 15ml")

    assert len(suggestions) == 3


def test_products_of_other_organizations_are_invisible(
    catalog: InMemoryCatalog, resolver: EntityResolver
) -> None:
    catalog.products.append(make_product(organization_id=OTHER_ORGANIZATION_ID))

    with FakeUnitOfWork(catalog) as uow:
        result = resolver.validate_product(uow, make_row(), ORGANIZATION_ID)

    assert result.product is None
    assert [w.code for w in result.warnings] == [IssueCode.PRODUCT_NOT_FOUND]


def test_missing_product_name_is_required(
    catalog: InMemoryCatalog, resolver: EntityResolver
) -> None:
    with FakeUnitOfWork(catalog) as uow:
        result = resolver.validate_product(uow, make_row(product_name="  "), ORGANIZATION_ID)

    assert [(e.field, e.code) for e in result.errors] == [
        ("productName", IssueCode.REQUIRED_FIELD_MISSING)
    ]


def test_store_failure_becomes_validation_error(
    catalog: InMemoryCatalog, resolver: EntityResolver, monkeypatch: pytest.MonkeyPatch
) -> None:
    uow = FakeUnitOfWork(catalog)

    def broken(*_args: object, **_kwargs: object) -> None:
        raise RecordStoreError("database is locked")

    monkeypatch.setattr(uow.repositories.products, "find_by_sku", broken)

    result = resolver.validate_product(uow, make_row(), ORGANIZATION_ID)

    assert [e.code for e in result.errors] == [IssueCode.VALIDATION_ERROR]
    assert result.product is None


def test_resolve_customer_matches_canonical_phone(
    catalog: InMemoryCatalog, resolver: EntityResolver
) -> None:
    existing = make_customer(phone="+212687654321")
    catalog.customers.append(existing)

    with FakeUnitOfWork(catalog) as uow:
        customer = resolver.resolve_customer(uow, make_row(phone="0687654321"), ORGANIZATION_ID)

    assert customer is existing
    assert len(catalog.customers) == 1


def test_resolve_customer_fills_missing_details(
    catalog: InMemoryCatalog, resolver: EntityResolver
) -> None:
    existing = make_customer(email=None, postal_code=None)
    catalog.customers.append(existing)
    row = make_row(email="ahmed@example.ma", postal_code="20000")

    with FakeUnitOfWork(catalog) as uow:
        resolver.resolve_customer(uow, row, ORGANIZATION_ID)
        assert uow.commits == 1

    assert existing.email == "ahmed@example.ma"
    assert existing.postal_code == "20000"


def test_resolve_customer_creates_with_split_name(
    catalog: InMemoryCatalog, resolver: EntityResolver
) -> None:
    row = make_row(customer_name="  Fatima Zahra El Idrissi ", phone="+212 6 61 23 45 67")

    with FakeUnitOfWork(catalog) as uow:
        customer = resolver.resolve_customer(uow, row, ORGANIZATION_ID)

    assert catalog.customers == [customer]
    assert customer.first_name == "Fatima"
    assert customer.last_name == "Zahra El Idrissi"
    assert customer.phone == "+212661234567"
    assert customer.created_at == FIXED_NOW


def test_resolve_customer_without_phone_matches_by_name(
    catalog: InMemoryCatalog, resolver: EntityResolver
) -> None:
    existing = make_customer(phone=None)
    catalog.customers.append(existing)

    with FakeUnitOfWork(catalog) as uow:
        customer = resolver.resolve_customer(uow, make_row(phone=""), ORGANIZATION_ID)

    assert customer is existing


def test_concurrent_customer_creation_reuses_the_winner(
    catalog: InMemoryCatalog, resolver: EntityResolver
) -> None:
    winner = make_customer()

    def other_writer_commits_first() -> None:
        catalog.customers.append(winner)
        raise DuplicateEntityError("UNIQUE constraint failed: customer.organization_id, phone")

    uow = FakeUnitOfWork(catalog, before_commit=[other_writer_commits_first])
    with uow:
        customer = resolver.resolve_customer(uow, make_row(), ORGANIZATION_ID)

    assert customer is winner
    assert uow.rollbacks == 1
    assert catalog.customers == [winner]


def test_conflict_without_winner_propagates(
    catalog: InMemoryCatalog, resolver: EntityResolver
) -> None:
    def fail() -> None:
        raise DuplicateEntityError("conflict")

    uow = FakeUnitOfWork(catalog, before_commit=[fail])
    with pytest.raises(DuplicateEntityError), uow:
        resolver.resolve_customer(uow, make_row(), ORGANIZATION_ID)


def test_resolve_product_creates_missing_product(
    catalog: InMemoryCatalog, resolver: EntityResolver
) -> None:
    with FakeUnitOfWork(catalog) as uow:
        product = resolver.resolve_product(
            uow, make_row(unit_price="99.50", product_sku=" "), ORGANIZATION_ID
        )

    assert catalog.products == [product]
    assert product.price == Decimal("99.50")
    assert product.sku is None
    assert product.stock_quantity == 100


def test_resolve_product_refuses_to_create_when_disabled(catalog: InMemoryCatalog) -> None:
    resolver = EntityResolver(IngestSettings(auto_create_products=False), clock=fixed_clock)

    with pytest.raises(IngestError, match="not found in catalog"), FakeUnitOfWork(catalog) as uow:
        resolver.resolve_product(uow, make_row(), ORGANIZATION_ID)


def test_resolve_default_store(catalog: InMemoryCatalog, resolver: EntityResolver) -> None:
    with FakeUnitOfWork(catalog) as uow:
        assert resolver.resolve_default_store(uow, ORGANIZATION_ID) is catalog.stores[0]
        with pytest.raises(StoreNotFoundError):
            resolver.resolve_default_store(uow, OTHER_ORGANIZATION_ID)
