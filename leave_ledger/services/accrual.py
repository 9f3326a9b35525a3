"""Accrual calculator: days credited to an employee for a calendar month."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from leave_ledger.exceptions import InvalidRateError
from leave_ledger.services.days import ZERO_DAYS, to_days

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import date
    from decimal import Decimal

    from leave_ledger.services.employee import EmployeeInfo
    from leave_ledger.services.period import MonthPeriod

logger = logging.getLogger(__name__)


def _is_employed_during(
    period: MonthPeriod,
    hire_date: date | None,
    termination_date: date | None,
) -> bool:
    """Whether the employee is on the books at some point in ``period``.

    Terminated before the month starts, or hired after it ends, means no accrual.
    """
    if termination_date is not None and termination_date < period.start:
        return False
    return not (hire_date is not None and hire_date > period.end)


def monthly_accrual(
    rate: Decimal,
    period: MonthPeriod,
    *,
    hire_date: date | None = None,
    termination_date: date | None = None,
) -> Decimal:
    """Compute the days accrued for ``period`` at a flat monthly ``rate``.

    A zero rate (employee not yet eligible) accrues nothing. There is no
    proration for partial months: an employee on the books for any part of
    the month receives the full rate.

    Raises:
        InvalidRateError: if ``rate`` is negative.
    """
    if rate < 0:
        msg = f"Leave accrual rate must not be negative, got {rate}"
        raise InvalidRateError(msg)

    if rate == 0:
        return ZERO_DAYS

    if not _is_employed_during(period, hire_date, termination_date):
        return ZERO_DAYS

    return to_days(rate)


def accrual_schedule(
    employee: EmployeeInfo,
    periods: Sequence[MonthPeriod],
    overrides: Mapping[MonthPeriod, Decimal] | None = None,
) -> dict[MonthPeriod, Decimal]:
    """Return the accrual for each of ``periods``.

    ``overrides`` holds accruals already persisted for a month (for example
    after a manual correction); those win over the employee's current rate.
    The rate is validated even when every month is overridden.
    """
    if employee.leave_accrual_rate < 0:
        msg = f"Employee {employee.employee_code} has a negative accrual rate ({employee.leave_accrual_rate})"
        raise InvalidRateError(msg)

    overrides = overrides or {}
    schedule: dict[MonthPeriod, Decimal] = {}
    for period in periods:
        if period in overrides:
            schedule[period] = to_days(overrides[period])
            continue
        schedule[period] = monthly_accrual(
            employee.leave_accrual_rate,
            period,
            hire_date=employee.hire_date,
            termination_date=employee.termination_date,
        )

    logger.debug(
        "Accrual schedule for employee=%s: %d periods, %d overridden",
        employee.id,
        len(schedule),
        sum(1 for p in periods if p in overrides),
    )
    return schedule
