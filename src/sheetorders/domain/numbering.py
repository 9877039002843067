"""Canonical order numbers: ``GS`` + processing date + daily sequence."""

from __future__ import annotations

import logging
import re
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Final

from sheetorders.domain.dates import start_of_day, utcnow

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import date
    from uuid import UUID

    from sheetorders.domain.dates import Clock
    from sheetorders.domain.ports import OrderUnitOfWork

log = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX: Final = "GS"
SEQUENCE_WIDTH: Final = 4
ORDER_NUMBER_PATTERN: Final = re.compile(rf"^{ORDER_NUMBER_PREFIX}\d{{8}}\d{{{SEQUENCE_WIDTH}}}$")


def format_order_number(day: date, sequence: int) -> str:
    return f"{ORDER_NUMBER_PREFIX}{day:%Y%m%d}{sequence:0{SEQUENCE_WIDTH}d}"


class OrderNumberAllocator:
    """Allocate order numbers serialized per (organization, UTC day).

    The lock only covers this process; the store's unique constraint on
    ``(organization_id, order_number)`` catches the rest and callers retry.
    """

    def __init__(self, *, clock: Clock = utcnow) -> None:
        self._clock = clock
        self._registry_lock = threading.Lock()
        self._locks: dict[tuple[UUID, date], threading.Lock] = {}

    def next_number(
        self, uow: OrderUnitOfWork, organization_id: UUID, *, today: date | None = None
    ) -> str:
        today = today or self._clock().date()
        created_today = uow.repositories.orders.count_created_since(
            organization_id, start_of_day(today)
        )
        return format_order_number(today, created_today + 1)

    @contextmanager
    def reserve(self, uow: OrderUnitOfWork, organization_id: UUID) -> Iterator[str]:
        """Yield the next number while holding the organization-day lock.

        The caller must create and commit its order inside the ``with`` block.
        """

        today = self._clock().date()
        with self._lock_for(organization_id, today):
            number = self.next_number(uow, organization_id, today=today)
            log.debug("Reserved order number %s for organization %s", number, organization_id)
            yield number

    def _lock_for(self, organization_id: UUID, day: date) -> threading.Lock:
        key = (organization_id, day)
        with self._registry_lock:
            for stale in [existing for existing in self._locks if existing[1] < day]:
                del self._locks[stale]
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock


__all__ = ["ORDER_NUMBER_PATTERN", "OrderNumberAllocator", "format_order_number"]
