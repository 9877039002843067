"""SQLAlchemy mapping metadata for the order catalog."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import relationship

from sheetorders.domain.model import (
    Currency,
    Customer,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    PlatformConnection,
    Product,
    Store,
)
from sheetorders.domain.normalization import product_name_key

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.engine.default import DefaultExecutionContext

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]
MoneyColumnType = Numeric(14, 4, asdecimal=True)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Core tables -----------------------------------------------------------------

platform_connection_table = Table(
    "platform_connection",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("organization_id", UUIDColumnType, nullable=False, index=True),
    Column("provider", String(50), nullable=False),
)

store_table = Table(
    "store",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("organization_id", UUIDColumnType, nullable=False, index=True),
    Column("name", String(200), nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", UTCDateTime(), nullable=True),
)

customer_table = Table(
    "customer",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("organization_id", UUIDColumnType, nullable=False),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False, default=""),
    Column("phone", String(20), nullable=True),
    Column("alternate_phone", String(20), nullable=True),
    Column("email", String(255), nullable=True),
    Column("address", String(500), nullable=True),
    Column("city", String(100), nullable=True),
    Column("postal_code", String(20), nullable=True),
    Column("created_at", UTCDateTime(), nullable=True),
    UniqueConstraint("organization_id", "phone"),
    Index("ix_customer_organization_id_name", "organization_id", "first_name", "last_name"),
)


def _product_name_key(context: DefaultExecutionContext) -> str:
    return product_name_key(context.get_current_parameters()["name"])


product_table = Table(
    "product",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("organization_id", UUIDColumnType, nullable=False),
    Column("name", String(255), nullable=False),
    Column("name_key", String(255), nullable=False, default=_product_name_key),
    Column("sku", String(100), nullable=True),
    Column("price", MoneyColumnType, nullable=False),
    Column("currency", Enum(Currency, native_enum=False), nullable=False),
    Column("stock_quantity", Integer, nullable=False),
    Column("created_at", UTCDateTime(), nullable=True),
    UniqueConstraint("organization_id", "sku"),
    UniqueConstraint("organization_id", "name_key", name="uq_product_organization_id_name_key"),
)

# "order" is reserved in SQL.
order_table = Table(
    "customer_order",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("order_number", String(32), nullable=False),
    Column("organization_id", UUIDColumnType, nullable=False),
    Column(
        "customer_id",
        UUIDColumnType,
        ForeignKey("customer.id", ondelete="RESTRICT"),
        nullable=False,
    ),
    Column("store_id", UUIDColumnType, ForeignKey("store.id", ondelete="RESTRICT"), nullable=False),
    Column("order_date", Date, nullable=False),
    Column("shipping_address", String(500), nullable=False),
    Column("shipping_city", String(100), nullable=False),
    Column("shipping_phone", String(20), nullable=True),
    Column("subtotal", MoneyColumnType, nullable=False),
    Column("total", MoneyColumnType, nullable=False),
    Column("currency", Enum(Currency, native_enum=False), nullable=False),
    Column("status", Enum(OrderStatus, native_enum=False), nullable=False),
    Column("payment_method", Enum(PaymentMethod, native_enum=False), nullable=False),
    Column("source", String(50), nullable=False),
    Column("source_row_number", Integer, nullable=True),
    Column("notes", Text, nullable=True),
    Column("created_at", UTCDateTime(), nullable=True),
    UniqueConstraint("organization_id", "order_number"),
    Index("ix_customer_order_organization_id_order_date", "organization_id", "order_date"),
    Index("ix_customer_order_organization_id_created_at", "organization_id", "created_at"),
)

order_item_table = Table(
    "order_item",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "order_id",
        UUIDColumnType,
        ForeignKey("customer_order.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "product_id", UUIDColumnType, ForeignKey("product.id", ondelete="RESTRICT"), nullable=False
    ),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", MoneyColumnType, nullable=False),
    Column("total", MoneyColumnType, nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(PlatformConnection, platform_connection_table)
    mapper_registry.map_imperatively(Store, store_table)
    mapper_registry.map_imperatively(Customer, customer_table)
    mapper_registry.map_imperatively(
        Product, product_table, exclude_properties=["name_key"]
    )
    mapper_registry.map_imperatively(OrderItem, order_item_table)
    mapper_registry.map_imperatively(
        Order,
        order_table,
        properties={
            "items": relationship(
                OrderItem,
                cascade="all, delete-orphan",
                lazy="selectin",
                order_by=order_item_table.c.id,
            ),
        },
    )
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
