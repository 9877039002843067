"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import TYPE_CHECKING, cast

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from sheetorders.adapters.sqlalchemy.mappings import (
    customer_table,
    order_item_table,
    order_table,
    platform_connection_table,
    product_table,
    store_table,
)
from sheetorders.domain.errors import DuplicateEntityError, RecordStoreError
from sheetorders.domain.model import Customer, Order, Product, Store
from sheetorders.domain.normalization import normalize_text, product_name_key
from sheetorders.domain.ports import OrderSnapshot

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterable, Iterator, Sequence
    from datetime import date, datetime

    from sqlalchemy import Select
    from sqlalchemy.orm import Session

    from sheetorders.domain.ports import ExactMatchCriteria

_CENT = Decimal("0.01")


@contextmanager
def store_errors() -> Iterator[None]:
    """Re-raise SQLAlchemy failures as record store errors."""

    try:
        yield
    except IntegrityError as exc:
        raise DuplicateEntityError(str(exc.orig)) from exc
    except SQLAlchemyError as exc:
        raise RecordStoreError(str(exc)) from exc


class SqlAlchemyConnectionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def organization_for(self, connection_id: uuid.UUID) -> uuid.UUID | None:
        stmt = select(platform_connection_table.c.organization_id).where(
            platform_connection_table.c.id == connection_id
        )
        with store_errors():
            return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyCustomerRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Customer) -> None:
        self.session.add(entity)

    def find_by_phone(self, organization_id: uuid.UUID, phone: str) -> Customer | None:
        stmt = (
            select(Customer)
            .where(customer_table.c.organization_id == organization_id)
            .where(customer_table.c.phone == phone)
            .limit(1)
        )
        with store_errors():
            return self.session.execute(stmt).scalars().first()

    def find_by_name(
        self, organization_id: uuid.UUID, first_name: str, last_name: str
    ) -> Customer | None:
        stmt = (
            select(Customer)
            .where(customer_table.c.organization_id == organization_id)
            .where(customer_table.c.first_name == first_name)
            .where(customer_table.c.last_name == last_name)
            .order_by(customer_table.c.created_at, customer_table.c.id)
            .limit(1)
        )
        with store_errors():
            return self.session.execute(stmt).scalars().first()


class SqlAlchemyProductRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Product) -> None:
        self.session.add(entity)

    def find_by_sku(self, organization_id: uuid.UUID, sku: str) -> Product | None:
        stmt = (
            select(Product)
            .where(product_table.c.organization_id == organization_id)
            .where(product_table.c.sku == sku)
            .limit(1)
        )
        with store_errors():
            return self.session.execute(stmt).scalars().first()

    def find_by_name(self, organization_id: uuid.UUID, name: str) -> Product | None:
        stmt = (
            select(Product)
            .where(product_table.c.organization_id == organization_id)
            .where(product_table.c.name_key == product_name_key(name))
            .limit(1)
        )
        with store_errors():
            return self.session.execute(stmt).scalars().first()

    def list_for_organization(self, organization_id: uuid.UUID, *, limit: int) -> Sequence[Product]:
        stmt = (
            select(Product)
            .where(product_table.c.organization_id == organization_id)
            .order_by(product_table.c.created_at, product_table.c.id)
            .limit(limit)
        )
        with store_errors():
            return self.session.execute(stmt).scalars().all()


class SqlAlchemyStoreRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Store) -> None:
        self.session.add(entity)

    def find_default(self, organization_id: uuid.UUID) -> Store | None:
        stmt = (
            select(Store)
            .where(store_table.c.organization_id == organization_id)
            .where(store_table.c.is_active.is_(True))
            .order_by(store_table.c.created_at, store_table.c.id)
            .limit(1)
        )
        with store_errors():
            return self.session.execute(stmt).scalars().first()


class SqlAlchemyOrderRepository:
    """Orders are handed to the domain as ``OrderSnapshot`` read models."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Order) -> None:
        self.session.add(entity)

    def count_created_since(self, organization_id: uuid.UUID, since: datetime) -> int:
        stmt = (
            select(func.count())
            .select_from(order_table)
            .where(order_table.c.organization_id == organization_id)
            .where(order_table.c.created_at >= since)
        )
        with store_errors():
            return int(self.session.execute(stmt).scalar_one())

    def find_exact_duplicate(self, criteria: ExactMatchCriteria) -> OrderSnapshot | None:
        stmt = (
            self._orders_with_customers(criteria.organization_id)
            .join(order_item_table, order_item_table.c.order_id == order_table.c.id)
            .where(order_table.c.order_date == criteria.order_date)
            .where(customer_table.c.phone == criteria.customer_phone)
            .where(order_item_table.c.product_id == criteria.product_id)
        )
        wanted_address = normalize_text(criteria.shipping_address)
        wanted_total = criteria.total.quantize(_CENT)
        # address and total compare in Python; sqlite lower() only folds ASCII
        for snapshot in self._snapshots(stmt):
            if (
                normalize_text(snapshot.shipping_address) == wanted_address
                and snapshot.total.quantize(_CENT) == wanted_total
            ):
                return snapshot
        return None

    def find_on_date(self, organization_id: uuid.UUID, order_date: date) -> Sequence[OrderSnapshot]:
        stmt = self._orders_with_customers(organization_id).where(
            order_table.c.order_date == order_date
        )
        return self._snapshots(stmt)

    def find_in_range(
        self,
        organization_id: uuid.UUID,
        start: date,
        end: date,
        *,
        exclude: date | None = None,
    ) -> Sequence[OrderSnapshot]:
        stmt = (
            self._orders_with_customers(organization_id)
            .where(order_table.c.order_date >= start)
            .where(order_table.c.order_date <= end)
        )
        if exclude is not None:
            stmt = stmt.where(order_table.c.order_date != exclude)
        return self._snapshots(stmt)

    @staticmethod
    def _orders_with_customers(organization_id: uuid.UUID) -> Select[tuple[Order, Customer]]:
        return (
            select(Order, Customer)
            .join(Customer, customer_table.c.id == order_table.c.customer_id)
            .where(order_table.c.organization_id == organization_id)
            .order_by(order_table.c.created_at, order_table.c.id)
        )

    def _snapshots(self, stmt: Select[tuple[Order, Customer]]) -> list[OrderSnapshot]:
        with store_errors():
            rows = self.session.execute(stmt).unique().tuples().all()
            products = self._products_for(order for order, _ in rows)
        return [_snapshot(order, customer, products) for order, customer in rows]

    def _products_for(self, orders: Iterable[Order]) -> dict[uuid.UUID, Product]:
        product_ids = {item.product_id for order in orders for item in order.items}
        if not product_ids:
            return {}
        stmt = select(Product).where(product_table.c.id.in_(product_ids))
        return {product.id: product for product in self.session.execute(stmt).scalars()}


def _snapshot(
    order: Order, customer: Customer, products: dict[uuid.UUID, Product]
) -> OrderSnapshot:
    items = list(order.items)
    known = [products[item.product_id] for item in items if item.product_id in products]
    return OrderSnapshot(
        id=order.id,
        order_number=order.order_number,
        order_date=order.order_date,
        created_at=order.created_at,
        customer_first_name=customer.first_name,
        customer_last_name=customer.last_name,
        customer_phone=customer.phone,
        shipping_address=order.shipping_address,
        total=order.total,
        unit_price=items[0].unit_price if items else None,
        product_names=tuple(product.name for product in known),
        product_skus=tuple(product.sku for product in known),
    )


if TYPE_CHECKING:
    from sheetorders.domain.ports.persistence import (
        ConnectionRepository,
        CustomerRepository,
        OrderRepository,
        ProductRepository,
        StoreRepository,
    )

    _session_stub = cast("Session", object())
    _connection_repo: ConnectionRepository = SqlAlchemyConnectionRepository(_session_stub)
    _customer_repo: CustomerRepository = SqlAlchemyCustomerRepository(_session_stub)
    _product_repo: ProductRepository = SqlAlchemyProductRepository(_session_stub)
    _store_repo: StoreRepository = SqlAlchemyStoreRepository(_session_stub)
    _order_repo: OrderRepository = SqlAlchemyOrderRepository(_session_stub)
