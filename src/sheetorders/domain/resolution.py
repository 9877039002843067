"""Resolve sheet rows against the customer, product and store catalog."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from sheetorders.config.ingest import IngestSettings
from sheetorders.domain.dates import utcnow
from sheetorders.domain.errors import (
    DuplicateEntityError,
    IngestError,
    RecordStoreError,
    StoreNotFoundError,
)
from sheetorders.domain.model import (
    Currency,
    Customer,
    IssueCode,
    IssueCollector,
    Product,
    ProductSuggestion,
    ProductValidationResult,
)
from sheetorders.domain.normalization import (
    blank_to_none,
    canonical_phone,
    coerce_price,
    product_name_key,
    split_customer_name,
)
from sheetorders.domain.similarity import calculate_string_similarity
from sheetorders.domain.validation.fields import validate_quantity

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from sheetorders.domain.dates import Clock
    from sheetorders.domain.model import RawOrderRow, Store
    from sheetorders.domain.ports import OrderUnitOfWork

log = logging.getLogger(__name__)


class EntityResolver:
    """Match rows to catalog entities and create the missing ones."""

    def __init__(self, settings: IngestSettings | None = None, *, clock: Clock = utcnow) -> None:
        self.settings = settings or IngestSettings()
        self._clock = clock

    # ------------------------------------------------------------------
    # product validation
    # ------------------------------------------------------------------

    def validate_product(
        self, uow: OrderUnitOfWork, row: RawOrderRow, organization_id: UUID
    ) -> ProductValidationResult:
        issues = IssueCollector()
        product_name = (row.product_name or "").strip()
        if not product_name:
            issues.error(
                "productName",
                IssueCode.REQUIRED_FIELD_MISSING,
                "Product name is required",
                row.product_name,
                "Enter a valid product name",
            )
            result = issues.result()
            return ProductValidationResult(errors=result.errors, warnings=result.warnings)

        issues.extend(validate_quantity(row.quantity))

        product: Product | None = None
        suggestions: tuple[ProductSuggestion, ...] = ()
        try:
            product = self._find_by_sku(uow, organization_id, row.product_sku)
            wanted_key = product_name_key(product_name)
            if product is not None and product_name_key(product.name) != wanted_key:
                issues.warning(
                    "productName",
                    IssueCode.NAME_MISMATCH,
                    f'Product name mismatch. Found: "{product.name}"',
                    row.product_name,
                    f'Consider using "{product.name}" instead',
                )
            if product is None:
                product = uow.repositories.products.find_by_name(organization_id, product_name)
            if product is None:
                suggestions = self.find_similar_products(uow, organization_id, product_name)
                self._report_missing_product(issues, row, suggestions)
            else:
                self._check_price_variance(issues, row, product)
        except RecordStoreError:
            log.exception(
                "Error validating product (organization=%s, product_name=%r, product_sku=%r)",
                organization_id,
                row.product_name,
                row.product_sku,
            )
            issues.error(
                "productName",
                IssueCode.VALIDATION_ERROR,
                "Error validating product against catalog",
                row.product_name,
                "Check product name and try again",
            )
            product = None
            suggestions = ()

        result = issues.result()
        return ProductValidationResult(
            errors=result.errors,
            warnings=result.warnings,
            product=product.to_resolved() if product is not None else None,
            suggestions=suggestions,
        )

    def find_similar_products(
        self, uow: OrderUnitOfWork, organization_id: UUID, product_name: str
    ) -> tuple[ProductSuggestion, ...]:
        """Rank catalog products by name similarity, best first."""

        wanted = product_name.lower()
        candidates = uow.repositories.products.list_for_organization(
            organization_id, limit=self.settings.product_scan_limit
        )
        scored = [
            ProductSuggestion(
                id=candidate.id,
                name=candidate.name,
                sku=candidate.sku,
                similarity=calculate_string_similarity(wanted, candidate.name.lower()),
            )
            for candidate in candidates
        ]
        # stable sort keeps catalog order among equal scores
        ranked = sorted(
            (item for item in scored if item.similarity > self.settings.suggestion_threshold),
            key=lambda item: item.similarity,
            reverse=True,
        )
        return tuple(ranked[: self.settings.suggestion_limit])

    def _report_missing_product(
        self,
        issues: IssueCollector,
        row: RawOrderRow,
        suggestions: tuple[ProductSuggestion, ...],
    ) -> None:
        if not self.settings.auto_create_products:
            issues.error(
                "productName",
                IssueCode.PRODUCT_NOT_FOUND,
                "Product not found in catalog",
                row.product_name,
                "Add the product to the catalog or fix the product name",
            )
        elif suggestions:
            issues.warning(
                "productName",
                IssueCode.PRODUCT_NOT_FOUND,
                f"Product not found. Found {len(suggestions)} similar products",
                row.product_name,
                "Consider using one of the suggested products",
            )
        else:
            issues.warning(
                "productName",
                IssueCode.PRODUCT_NOT_FOUND,
                "Product not found in catalog. Will be created automatically",
                row.product_name,
                "Verify product name or add to catalog manually",
            )

    def _check_price_variance(
        self, issues: IssueCollector, row: RawOrderRow, product: Product
    ) -> None:
        sheet_price = coerce_price(row.unit_price)
        catalog_price = product.price
        if not sheet_price or not catalog_price:
            return
        variance = abs(catalog_price - sheet_price) / catalog_price
        if variance > Decimal(str(self.settings.price_variance_threshold)):
            shown = f"{catalog_price.normalize():f} {product.currency}"
            issues.warning(
                "price",
                IssueCode.PRICE_MISMATCH,
                f"Price differs significantly from catalog ({shown})",
                row.unit_price,
                f"Verify price. Catalog price: {shown}",
            )

    # ------------------------------------------------------------------
    # resolution
    # ------------------------------------------------------------------

    def resolve_customer(
        self, uow: OrderUnitOfWork, row: RawOrderRow, organization_id: UUID
    ) -> Customer:
        phone = canonical_phone(row.phone)
        first_name, last_name = split_customer_name(row.customer_name.strip())

        def lookup() -> Customer | None:
            if phone is not None:
                return uow.repositories.customers.find_by_phone(organization_id, phone)
            return uow.repositories.customers.find_by_name(organization_id, first_name, last_name)

        existing = lookup()
        if existing is not None:
            if self._fill_missing_contact_details(existing, row):
                uow.commit()
            return existing

        customer = Customer(
            organization_id=organization_id,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            alternate_phone=canonical_phone(row.alternate_phone),
            email=blank_to_none(row.email),
            address=blank_to_none(row.address),
            city=blank_to_none(row.city),
            postal_code=blank_to_none(row.postal_code),
            created_at=self._clock(),
        )
        log.info("Creating customer %s for organization %s", customer.full_name, organization_id)
        return self._create_or_reuse(uow, customer, uow.repositories.customers.add, lookup)

    def resolve_product(
        self, uow: OrderUnitOfWork, row: RawOrderRow, organization_id: UUID
    ) -> Product:
        name = row.product_name.strip()
        sku = blank_to_none(row.product_sku)

        def lookup() -> Product | None:
            found = self._find_by_sku(uow, organization_id, sku)
            if found is None:
                found = uow.repositories.products.find_by_name(organization_id, name)
            return found

        existing = lookup()
        if existing is not None:
            return existing
        if not self.settings.auto_create_products:
            raise IngestError(f'Product "{name}" not found in catalog')

        product = Product(
            organization_id=organization_id,
            name=name,
            sku=sku,
            price=coerce_price(row.unit_price) or Decimal(0),
            currency=Currency.MAD,
            created_at=self._clock(),
        )
        log.info("Creating product %r for organization %s", name, organization_id)
        return self._create_or_reuse(uow, product, uow.repositories.products.add, lookup)

    def resolve_default_store(self, uow: OrderUnitOfWork, organization_id: UUID) -> Store:
        store = uow.repositories.stores.find_default(organization_id)
        if store is None:
            raise StoreNotFoundError(organization_id)
        return store

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _find_by_sku(
        uow: OrderUnitOfWork, organization_id: UUID, sku: str | None
    ) -> Product | None:
        sku = blank_to_none(sku)
        if sku is None:
            return None
        return uow.repositories.products.find_by_sku(organization_id, sku)

    @staticmethod
    def _create_or_reuse[TEntity](
        uow: OrderUnitOfWork,
        entity: TEntity,
        add: Callable[[TEntity], None],
        lookup: Callable[[], TEntity | None],
    ) -> TEntity:
        """Add and commit ``entity``; on a uniqueness conflict reuse the winner."""

        try:
            add(entity)
            uow.commit()
        except DuplicateEntityError:
            uow.rollback()
            winner = lookup()
            if winner is None:
                raise
            log.info("Reusing %s created concurrently", type(winner).__name__)
            return winner
        return entity

    @staticmethod
    def _fill_missing_contact_details(customer: Customer, row: RawOrderRow) -> bool:
        updates = {
            "email": blank_to_none(row.email),
            "alternate_phone": canonical_phone(row.alternate_phone),
            "address": blank_to_none(row.address),
            "city": blank_to_none(row.city),
            "postal_code": blank_to_none(row.postal_code),
        }
        changed = False
        for attribute, value in updates.items():
            if value is not None and getattr(customer, attribute) is None:
                setattr(customer, attribute, value)
                changed = True
        return changed


__all__ = ["EntityResolver"]
