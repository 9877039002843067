from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sheetorders.adapters.sqlalchemy import create_all_tables, start_mappers
from sheetorders.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyOrderUnitOfWork,
    shutdown,
    startup,
)
from sheetorders.domain.model import PlatformConnection
from tests.support.fakes import InMemoryCatalog, fake_unit_of_work_factory
from tests.support.rows import CONNECTION_ID, ORGANIZATION_ID, make_store

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from tests.support.fakes import FakeUnitOfWork


@pytest.fixture
def catalog() -> InMemoryCatalog:
    """Fake store seeded with one connection and one active store."""

    return InMemoryCatalog(
        connections=[PlatformConnection(id=CONNECTION_ID, organization_id=ORGANIZATION_ID)],
        stores=[make_store()],
    )


@pytest.fixture
def fake_unit_of_work(catalog: InMemoryCatalog) -> Callable[[], FakeUnitOfWork]:
    return fake_unit_of_work_factory(catalog)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # one shared connection so the in-memory database survives across sessions and threads
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    start_mappers()
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyOrderUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyOrderUnitOfWork:
        return SqlAlchemyOrderUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def seeded_sqlite(sqlite_session: Session) -> Session:
    """Persist the connection and default store used by the ingestion tests."""

    sqlite_session.add(PlatformConnection(id=CONNECTION_ID, organization_id=ORGANIZATION_ID))
    sqlite_session.add(make_store())
    sqlite_session.commit()
    return sqlite_session
