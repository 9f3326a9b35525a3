"""Tests for the leave duration calculator (weekends, public and company holidays)."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest

from leave_ledger.exceptions import InvalidDateRangeError
from leave_ledger.models.enums import ExcludedDayKind, WorkWeek
from leave_ledger.models.holiday import CompanyHoliday
from leave_ledger.services.duration import WorkingDaysOptions, calculate_leave_days, count_leave_days
from leave_ledger.services.holiday import Holiday

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

WORKING_DAYS_URL = "/leave/working-days"

# Monday 3 March to Friday 7 March 2025; no public holidays that week.
MON = date(2025, 3, 3)
FRI = date(2025, 3, 7)
SUN = date(2025, 3, 9)


# ---------------------------------------------------------------------------
# Weekends
# ---------------------------------------------------------------------------


class TestWeekends:
    def test_plain_working_week(self) -> None:
        result = count_leave_days(MON, FRI)
        assert result.total_days == 5
        assert result.working_days == 5
        assert result.excluded_dates == ()

    def test_two_weeks_exclude_weekends(self) -> None:
        result = count_leave_days(MON, date(2025, 3, 16))
        assert result.total_days == 14
        assert result.weekend_days == 4
        assert result.working_days == 10

    def test_single_day(self) -> None:
        assert count_leave_days(MON, MON).working_days == 1

    def test_weekend_only_range(self) -> None:
        result = count_leave_days(date(2025, 3, 8), SUN)
        assert result.working_days == 0
        assert all(d.kind == ExcludedDayKind.WEEKEND for d in result.excluded_dates)

    def test_six_day_week_works_saturdays(self) -> None:
        result = count_leave_days(MON, SUN, WorkingDaysOptions(work_week=WorkWeek.SIX_DAY))
        assert result.working_days == 6
        assert [d.date for d in result.excluded_dates] == [SUN]

    def test_seven_day_week_counts_everything(self) -> None:
        result = count_leave_days(MON, SUN, WorkingDaysOptions(work_week=WorkWeek.SEVEN_DAY))
        assert result.working_days == 7
        assert result.weekend_days == 0

    def test_saturdays_included_when_not_excluded(self) -> None:
        result = count_leave_days(MON, SUN, WorkingDaysOptions(exclude_saturdays=False))
        assert result.working_days == 6

    def test_end_before_start_rejected(self) -> None:
        with pytest.raises(InvalidDateRangeError):
            count_leave_days(FRI, MON)


# ---------------------------------------------------------------------------
# Public holidays
# ---------------------------------------------------------------------------


class TestPublicHolidays:
    def test_workers_day_excluded(self) -> None:
        result = count_leave_days(date(2025, 5, 1), date(2025, 5, 2))
        assert result.public_holidays == 1
        assert result.working_days == 1
        assert result.excluded_dates[0].name == "Workers' Day"

    def test_public_holidays_can_be_counted(self) -> None:
        options = WorkingDaysOptions(exclude_public_holidays=False)
        assert count_leave_days(date(2025, 5, 1), date(2025, 5, 2), options).working_days == 2

    def test_easter_week(self) -> None:
        # Good Friday and Independence Day share 18 April 2025; Easter Saturday
        # rolls to Monday 21 April, which is already Easter Monday.
        result = count_leave_days(date(2025, 4, 14), date(2025, 4, 25))
        assert result.total_days == 12
        assert result.weekend_days == 2
        assert result.public_holidays == 2
        assert result.working_days == 8

    def test_sunday_holiday_rolls_to_monday(self) -> None:
        # New Year's Day 2023 fell on a Sunday.
        result = count_leave_days(date(2022, 12, 30), date(2023, 1, 3))
        assert result.weekend_days == 2
        assert result.public_holidays == 1
        assert result.working_days == 2
        public = [d for d in result.excluded_dates if d.kind == ExcludedDayKind.PUBLIC_HOLIDAY]
        assert public[0].date == date(2023, 1, 2)

    def test_rollover_outside_range_is_dropped(self) -> None:
        result = count_leave_days(date(2022, 12, 30), date(2023, 1, 1))
        assert result.public_holidays == 0
        assert result.working_days == 1

    def test_no_rollover_when_sundays_are_working_days(self) -> None:
        options = WorkingDaysOptions(exclude_sundays=False)
        result = count_leave_days(date(2022, 12, 30), date(2023, 1, 3), options)
        assert result.weekend_days == 1
        assert result.public_holidays == 1
        assert result.working_days == 3


# ---------------------------------------------------------------------------
# Custom holidays
# ---------------------------------------------------------------------------


class TestCustomHolidays:
    def test_custom_holiday_excluded(self) -> None:
        result = count_leave_days(MON, FRI, custom_holidays=[Holiday(date(2025, 3, 5), "Founders Day")])
        assert result.custom_holidays == 1
        assert result.working_days == 4

    def test_custom_holiday_on_weekend_ignored(self) -> None:
        result = count_leave_days(MON, SUN, custom_holidays=[Holiday(date(2025, 3, 8), "Staff Day")])
        assert result.custom_holidays == 0
        assert result.working_days == 5

    def test_custom_holiday_on_public_holiday_counted_once(self) -> None:
        result = count_leave_days(
            date(2025, 5, 1),
            date(2025, 5, 2),
            custom_holidays=[Holiday(date(2025, 5, 1), "Company Picnic")],
        )
        assert result.public_holidays == 1
        assert result.custom_holidays == 0
        assert result.working_days == 1

    async def test_company_holidays_loaded_from_database(self, db_session: AsyncSession) -> None:
        db_session.add(CompanyHoliday(date=date(2025, 3, 4), name="Founders Day"))
        await db_session.commit()

        result = await calculate_leave_days(db_session, MON, FRI, extra_holidays=[date(2025, 3, 6)])

        assert result.custom_holidays == 2
        assert result.working_days == 3


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------


class TestWorkingDaysEndpoint:
    async def test_default_policy(self, async_client: AsyncClient) -> None:
        resp = await async_client.post(WORKING_DAYS_URL, json={"start_date": "2025-03-03", "end_date": "2025-03-09"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["total_days"] == 7
        assert data["working_days"] == 5
        assert data["weekend_days"] == 2
        assert data["policy"]["working_days_policy"] == "5_day"

    async def test_policy_override(self, async_client: AsyncClient) -> None:
        resp = await async_client.post(
            WORKING_DAYS_URL,
            json={"start_date": "2025-03-03", "end_date": "2025-03-09", "working_days_policy": "6_day"},
        )
        assert resp.status_code == 200
        assert resp.json()["working_days"] == 6

    async def test_custom_holidays_in_body(self, async_client: AsyncClient) -> None:
        resp = await async_client.post(
            WORKING_DAYS_URL,
            json={"start_date": "2025-03-03", "end_date": "2025-03-07", "custom_holidays": ["2025-03-05"]},
        )
        data = resp.json()
        assert data["working_days"] == 4
        assert data["excluded_dates"] == [{"date": "2025-03-05", "kind": "custom_holiday", "name": "Company Holiday"}]

    async def test_reversed_range_rejected(self, async_client: AsyncClient) -> None:
        resp = await async_client.post(WORKING_DAYS_URL, json={"start_date": "2025-03-07", "end_date": "2025-03-03"})
        assert resp.status_code == 422
