"""Leave duration calculator: working days between two dates."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import TYPE_CHECKING

from leave_ledger.exceptions import InvalidDateRangeError
from leave_ledger.models.enums import ExcludedDayKind, WorkWeek
from leave_ledger.services.holiday import Holiday, fetch_company_holidays, public_holidays_between

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_ledger.config import Settings

_SATURDAY = 5
_SUNDAY = 6
_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class WorkingDaysOptions:
    """Which days count as leave days."""

    work_week: WorkWeek = WorkWeek.FIVE_DAY
    exclude_saturdays: bool = True
    exclude_sundays: bool = True
    exclude_public_holidays: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> WorkingDaysOptions:
        return cls(
            work_week=WorkWeek(settings.working_days_policy),
            exclude_saturdays=settings.exclude_saturdays,
            exclude_sundays=settings.exclude_sundays,
            exclude_public_holidays=settings.exclude_public_holidays,
        )

    @property
    def saturdays_off(self) -> bool:
        # A six-day week works Saturdays regardless of the flag.
        return self.exclude_saturdays and self.work_week == WorkWeek.FIVE_DAY

    @property
    def sundays_off(self) -> bool:
        return self.exclude_sundays

    def is_weekend_off(self, day: date) -> bool:
        weekday = day.weekday()
        return (weekday == _SATURDAY and self.saturdays_off) or (weekday == _SUNDAY and self.sundays_off)


@dataclass(frozen=True)
class ExcludedDay:
    date: date
    kind: ExcludedDayKind
    name: str


@dataclass(frozen=True)
class LeaveDaysBreakdown:
    """How a date range reduces to chargeable leave days."""

    start_date: date
    end_date: date
    total_days: int
    working_days: int
    weekend_days: int = 0
    public_holidays: int = 0
    custom_holidays: int = 0
    excluded_dates: tuple[ExcludedDay, ...] = field(default_factory=tuple)


def _observed_date(holiday: date, options: WorkingDaysOptions) -> date:
    """Move a holiday that falls on an off weekend day to the following Monday."""
    weekday = holiday.weekday()
    if weekday == _SUNDAY and options.sundays_off:
        return holiday + _ONE_DAY
    if weekday == _SATURDAY and options.saturdays_off:
        return holiday + 2 * _ONE_DAY
    return holiday


def count_leave_days(
    start_date: date,
    end_date: date,
    options: WorkingDaysOptions | None = None,
    custom_holidays: Iterable[Holiday] = (),
) -> LeaveDaysBreakdown:
    """Count the working days in ``[start_date, end_date]`` inclusive.

    Weekend days are excluded per the work-week policy. Public holidays that
    fall on an off weekend day roll over to the Monday after, provided that
    Monday is still inside the range. Custom holidays are excluded unless they
    fall on an off weekend day or coincide with a public holiday. A seven-day
    week excludes nothing.

    Raises:
        InvalidDateRangeError: if ``end_date`` precedes ``start_date``.
    """
    if end_date < start_date:
        msg = f"end_date {end_date.isoformat()} is before start_date {start_date.isoformat()}"
        raise InvalidDateRangeError(msg)

    options = options or WorkingDaysOptions()
    total_days = (end_date - start_date).days + 1

    if options.work_week == WorkWeek.SEVEN_DAY:
        return LeaveDaysBreakdown(start_date, end_date, total_days=total_days, working_days=total_days)

    weekends: list[ExcludedDay] = []
    current = start_date
    while current <= end_date:
        if options.is_weekend_off(current):
            weekends.append(ExcludedDay(current, ExcludedDayKind.WEEKEND, current.strftime("%A")))
        current += _ONE_DAY

    public: dict[date, ExcludedDay] = {}
    if options.exclude_public_holidays:
        for holiday in public_holidays_between(start_date, end_date):
            observed = _observed_date(holiday.date, options)
            if observed > end_date or observed in public:
                continue
            public[observed] = ExcludedDay(observed, ExcludedDayKind.PUBLIC_HOLIDAY, holiday.name)

    custom: dict[date, ExcludedDay] = {}
    for holiday in custom_holidays:
        if not start_date <= holiday.date <= end_date:
            continue
        if options.is_weekend_off(holiday.date) or holiday.date in public or holiday.date in custom:
            continue
        custom[holiday.date] = ExcludedDay(holiday.date, ExcludedDayKind.CUSTOM_HOLIDAY, holiday.name)

    excluded = sorted([*weekends, *public.values(), *custom.values()], key=lambda d: d.date)
    working_days = total_days - len(weekends) - len(public) - len(custom)

    return LeaveDaysBreakdown(
        start_date=start_date,
        end_date=end_date,
        total_days=total_days,
        working_days=max(0, working_days),
        weekend_days=len(weekends),
        public_holidays=len(public),
        custom_holidays=len(custom),
        excluded_dates=tuple(excluded),
    )


async def calculate_leave_days(
    session: AsyncSession,
    start_date: date,
    end_date: date,
    options: WorkingDaysOptions | None = None,
    extra_holidays: Iterable[date] = (),
) -> LeaveDaysBreakdown:
    """Count leave days, excluding stored company holidays and any ``extra_holidays``."""
    if end_date < start_date:
        msg = f"end_date {end_date.isoformat()} is before start_date {start_date.isoformat()}"
        raise InvalidDateRangeError(msg)

    holidays = await fetch_company_holidays(session, start_date, end_date)
    holidays.extend(Holiday(day, "Company Holiday") for day in extra_holidays)
    return count_leave_days(start_date, end_date, options, holidays)
