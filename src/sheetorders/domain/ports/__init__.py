"""Ports the ingestion domain expects adapters to implement."""

from __future__ import annotations

from .persistence import (
    ConnectionRepository,
    CustomerRepository,
    ExactMatchCriteria,
    OrderRepository,
    OrderSnapshot,
    ProductRepository,
    Repository,
    StoreRepository,
)
from .unit_of_work import OrderRepositories, OrderUnitOfWork, RepositoryCollection, UnitOfWork

__all__ = [
    "ConnectionRepository",
    "CustomerRepository",
    "ExactMatchCriteria",
    "OrderRepositories",
    "OrderRepository",
    "OrderSnapshot",
    "OrderUnitOfWork",
    "ProductRepository",
    "Repository",
    "RepositoryCollection",
    "StoreRepository",
    "UnitOfWork",
]
