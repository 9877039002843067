"""Date parsing and calendar arithmetic for sheet order dates."""

from __future__ import annotations

import calendar
import re
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


# Day-first formats; sheets are filled in by hand in Morocco and France.
_DAY_FIRST = re.compile(r"^(\d{1,2})[/.-](\d{1,2})[/.-](\d{4})$")
_YEAR_FIRST_SLASH = re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$")


def parse_order_date(raw: str | None) -> date | None:
    """Return the calendar date written in ``raw`` or ``None`` when unparseable.

    Accepted: ``YYYY-MM-DD``, ISO datetimes, ``DD/MM/YYYY``, ``DD-MM-YYYY``,
    ``DD.MM.YYYY`` and ``YYYY/MM/DD``.
    """

    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    if match := _DAY_FIRST.match(text):
        day, month, year = (int(part) for part in match.groups())
    elif match := _YEAR_FIRST_SLASH.match(text):
        year, month, day = (int(part) for part in match.groups())
    else:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def shift_months(value: date, months: int) -> date:
    """Move ``value`` by whole months, clamping to the last day of the target month."""

    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def shift_years(value: date, years: int) -> date:
    return shift_months(value, 12 * years)


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=UTC)


def day_bounds(value: date) -> tuple[datetime, datetime]:
    """Half-open UTC interval covering ``value``."""

    start = start_of_day(value)
    return start, start + timedelta(days=1)


__all__ = [
    "Clock",
    "day_bounds",
    "parse_order_date",
    "shift_months",
    "shift_years",
    "start_of_day",
    "utcnow",
]
