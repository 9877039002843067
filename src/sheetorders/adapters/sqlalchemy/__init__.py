"""SQLAlchemy adapter package for sheetorders."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyConnectionRepository,
    SqlAlchemyCustomerRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyStoreRepository,
    store_errors,
)
from .unit_of_work import (
    SqlAlchemyOrderUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyConnectionRepository",
    "SqlAlchemyCustomerRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyOrderUnitOfWork",
    "SqlAlchemyProductRepository",
    "SqlAlchemyStoreRepository",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "store_errors",
]
