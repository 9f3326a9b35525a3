"""Tests for the public holiday calendar and company holiday lookups."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest

from leave_ledger.models.holiday import CompanyHoliday
from leave_ledger.services.holiday import (
    easter_sunday,
    fetch_company_holidays,
    heroes_day,
    public_holidays,
    public_holidays_between,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@pytest.mark.parametrize(
    ("year", "expected"),
    [
        (2019, date(2019, 4, 21)),
        (2024, date(2024, 3, 31)),
        (2025, date(2025, 4, 20)),
        (2026, date(2026, 4, 5)),
    ],
)
def test_easter_sunday(year: int, expected: date) -> None:
    assert easter_sunday(year) == expected


def test_heroes_day_is_second_monday_of_august() -> None:
    assert heroes_day(2025) == date(2025, 8, 11)
    assert heroes_day(2024) == date(2024, 8, 12)
    assert heroes_day(2025).weekday() == 0


class TestPublicHolidays:
    def test_includes_fixed_and_moveable_feasts(self) -> None:
        holidays = {h.date: h.name for h in public_holidays(2025)}
        assert holidays[date(2025, 1, 1)] == "New Year's Day"
        assert holidays[date(2025, 4, 21)] == "Easter Monday"
        assert holidays[date(2025, 4, 19)] == "Easter Saturday"
        assert holidays[date(2025, 8, 12)] == "Defence Forces Day"
        assert holidays[date(2025, 12, 22)] == "Unity Day"

    def test_sorted_by_date(self) -> None:
        dates = [h.date for h in public_holidays(2025)]
        assert dates == sorted(dates)

    def test_count(self) -> None:
        # 8 fixed + Good Friday, Easter Saturday, Easter Monday + Heroes and Defence Forces
        assert len(public_holidays(2025)) == 13

    def test_between_spans_years(self) -> None:
        holidays = public_holidays_between(date(2024, 12, 24), date(2025, 1, 2))
        assert [h.date for h in holidays] == [date(2024, 12, 25), date(2024, 12, 26), date(2025, 1, 1)]


async def test_fetch_company_holidays_in_range(db_session: AsyncSession) -> None:
    db_session.add(CompanyHoliday(date=date(2025, 3, 5), name="Founders Day"))
    db_session.add(CompanyHoliday(date=date(2025, 6, 1), name="Staff Day"))
    await db_session.commit()

    holidays = await fetch_company_holidays(db_session, date(2025, 3, 1), date(2025, 3, 31))

    assert len(holidays) == 1
    assert holidays[0].date == date(2025, 3, 5)
    assert holidays[0].name == "Founders Day"
