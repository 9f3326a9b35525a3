"""Public holiday calendar and company holiday lookups."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leave_ledger.models.holiday import CompanyHoliday

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

_MONDAY = 0

# (month, day, name) of holidays that fall on the same date every year.
_FIXED_HOLIDAYS = (
    (1, 1, "New Year's Day"),
    (2, 21, "National Youth Day"),
    (4, 18, "Independence Day"),
    (5, 1, "Workers' Day"),
    (5, 25, "Africa Day"),
    (12, 22, "Unity Day"),
    (12, 25, "Christmas Day"),
    (12, 26, "Boxing Day"),
)


@dataclass(frozen=True, order=True)
class Holiday:
    date: date
    name: str


def easter_sunday(year: int) -> date:
    """Gregorian Easter Sunday (anonymous computus)."""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


def heroes_day(year: int) -> date:
    """Second Monday of August."""
    first = date(year, 8, 1)
    first_monday = first + timedelta(days=(_MONDAY - first.weekday()) % 7)
    return first_monday + timedelta(days=7)


def public_holidays(year: int) -> list[Holiday]:
    """Gazetted public holidays for ``year``, in date order."""
    holidays = [Holiday(date(year, month, day), name) for month, day, name in _FIXED_HOLIDAYS]

    easter = easter_sunday(year)
    holidays.append(Holiday(easter - timedelta(days=2), "Good Friday"))
    holidays.append(Holiday(easter - timedelta(days=1), "Easter Saturday"))
    holidays.append(Holiday(easter + timedelta(days=1), "Easter Monday"))

    heroes = heroes_day(year)
    holidays.append(Holiday(heroes, "Heroes' Day"))
    holidays.append(Holiday(heroes + timedelta(days=1), "Defence Forces Day"))

    return sorted(holidays)


def public_holidays_between(start: date, end: date) -> list[Holiday]:
    """Public holidays dated within ``[start, end]`` inclusive."""
    return [h for year in range(start.year, end.year + 1) for h in public_holidays(year) if start <= h.date <= end]


async def fetch_company_holidays(
    session: AsyncSession,
    start_date: date,
    end_date: date,
) -> list[Holiday]:
    """Fetch company holidays in the given date range."""
    result = await session.execute(
        select(CompanyHoliday)
        .where(
            col(CompanyHoliday.date) >= start_date,
            col(CompanyHoliday.date) <= end_date,
        )
        .order_by(col(CompanyHoliday.date))
    )
    return [Holiday(h.date, h.name) for h in result.scalars().all()]
