"""Tests for the monthly accrual calculator."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

import pytest

from leave_ledger.exceptions import InvalidRateError
from leave_ledger.services.accrual import accrual_schedule, monthly_accrual
from leave_ledger.services.employee import EmployeeInfo
from leave_ledger.services.period import MonthPeriod, months_of_year

JANUARY = MonthPeriod(2025, 1)


def _employee(rate: str = "1.833", **overrides: object) -> EmployeeInfo:
    data: dict[str, object] = {
        "id": uuid.uuid4(),
        "employee_code": "E001",
        "first_name": "Jane",
        "surname": "Doe",
        "leave_entitlement": Decimal("22"),
        "leave_accrual_rate": Decimal(rate),
    }
    data.update(overrides)
    return EmployeeInfo.model_validate(data)


class TestMonthlyAccrual:
    def test_flat_rate(self) -> None:
        assert monthly_accrual(Decimal("2.5"), JANUARY) == Decimal("2.500")

    def test_rate_is_quantized(self) -> None:
        assert monthly_accrual(Decimal("1.8333"), JANUARY) == Decimal("1.833")

    def test_zero_rate_accrues_nothing(self) -> None:
        assert monthly_accrual(Decimal("0"), JANUARY) == Decimal("0")

    def test_negative_rate_rejected(self) -> None:
        with pytest.raises(InvalidRateError):
            monthly_accrual(Decimal("-1"), JANUARY)

    def test_no_proration_for_mid_month_hire(self) -> None:
        result = monthly_accrual(Decimal("2"), JANUARY, hire_date=date(2025, 1, 31))
        assert result == Decimal("2.000")

    def test_hired_after_month_accrues_nothing(self) -> None:
        assert monthly_accrual(Decimal("2"), JANUARY, hire_date=date(2025, 2, 1)) == Decimal("0")

    def test_terminated_before_month_accrues_nothing(self) -> None:
        result = monthly_accrual(Decimal("2"), JANUARY, termination_date=date(2024, 12, 31))
        assert result == Decimal("0")

    def test_terminated_during_month_accrues_full_rate(self) -> None:
        result = monthly_accrual(Decimal("2"), JANUARY, termination_date=date(2025, 1, 1))
        assert result == Decimal("2.000")


class TestAccrualSchedule:
    def test_one_entry_per_period(self) -> None:
        schedule = accrual_schedule(_employee("2"), months_of_year(2025))
        assert len(schedule) == 12
        assert all(value == Decimal("2.000") for value in schedule.values())

    def test_overrides_win_over_rate(self) -> None:
        periods = [MonthPeriod(2025, 1), MonthPeriod(2025, 2)]
        schedule = accrual_schedule(_employee("2"), periods, {MonthPeriod(2025, 2): Decimal("0.5")})
        assert schedule[MonthPeriod(2025, 1)] == Decimal("2.000")
        assert schedule[MonthPeriod(2025, 2)] == Decimal("0.500")

    def test_respects_termination(self) -> None:
        employee = _employee("2", termination_date=date(2025, 2, 10))
        schedule = accrual_schedule(employee, [MonthPeriod(2025, 2), MonthPeriod(2025, 3)])
        assert schedule[MonthPeriod(2025, 2)] == Decimal("2.000")
        assert schedule[MonthPeriod(2025, 3)] == Decimal("0")

    def test_negative_rate_rejected_even_when_overridden(self) -> None:
        with pytest.raises(InvalidRateError):
            accrual_schedule(_employee("-0.5"), [JANUARY], {JANUARY: Decimal("1")})
