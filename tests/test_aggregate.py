"""Tests for department summaries, utilization bands and low-balance warnings."""

from __future__ import annotations

import uuid
from decimal import Decimal

import pytest

from leave_ledger.models.enums import BalanceSeverity, UtilizationBand
from leave_ledger.services.aggregate import (
    EmployeeBalance,
    ThresholdPolicy,
    UtilizationPolicy,
    grand_total,
    low_balance_warnings,
    severity_counts,
    summarize_by_department,
    summarize_severity,
    summarize_utilization,
    utilization_percentage,
)
from leave_ledger.services.employee import UNASSIGNED_DEPARTMENT, EmployeeInfo
from leave_ledger.services.ledger import LedgerRow
from leave_ledger.services.period import MonthPeriod

PERIOD = MonthPeriod(2025, 1)


def _entry(
    code: str,
    cf: str,
    department: str | None = "A",
    entitlement: str = "20",
    taken: str = "0",
) -> EmployeeBalance:
    employee = EmployeeInfo(
        id=uuid.uuid4(),
        employee_code=code,
        first_name="Test",
        surname=code,
        department=department,
        leave_entitlement=Decimal(entitlement),
    )
    balance_cf = Decimal(cf)
    row = LedgerRow.from_persisted(
        PERIOD.start,
        balance_cf + Decimal(taken),
        Decimal("0"),
        Decimal(taken),
        balance_cf,
    )
    return EmployeeBalance(employee=employee, row=row)


# ---------------------------------------------------------------------------
# Department summary
# ---------------------------------------------------------------------------


class TestDepartmentSummary:
    def test_department_and_grand_totals(self) -> None:
        entries = [_entry("E1", "3.25", "A"), _entry("E2", "10.0", "A"), _entry("E3", "2.0", "B")]
        summaries = summarize_by_department(entries)

        assert [s.department for s in summaries] == ["A", "B"]
        assert summaries[0].totals.balance_cf == Decimal("13.25")
        assert summaries[0].employee_count == 2
        assert summaries[1].totals.balance_cf == Decimal("2.0")
        assert grand_total(summaries).balance_cf == Decimal("15.25")

    def test_missing_department_is_unassigned(self) -> None:
        summaries = summarize_by_department([_entry("E1", "1", department=None)])
        assert summaries[0].department == UNASSIGNED_DEPARTMENT

    def test_every_column_is_summed(self) -> None:
        summaries = summarize_by_department([_entry("E1", "4", taken="1"), _entry("E2", "6", taken="2")])
        totals = summaries[0].totals
        assert totals.balance_bf == Decimal("13")
        assert totals.days_taken == Decimal("3")
        assert totals.balance_cf == Decimal("10")
        assert totals.balance_cf == totals.balance_bf + totals.days_accrued - totals.days_taken

    def test_empty_input(self) -> None:
        assert summarize_by_department([]) == []
        assert grand_total([]).balance_cf == Decimal("0")


# ---------------------------------------------------------------------------
# Utilization
# ---------------------------------------------------------------------------


class TestUtilization:
    def test_percentage(self) -> None:
        assert utilization_percentage(Decimal("20"), Decimal("5")) == Decimal("75")

    def test_zero_entitlement_is_zero_percent(self) -> None:
        assert utilization_percentage(Decimal("0"), Decimal("3")) == Decimal("0")

    def test_overdrawn_exceeds_hundred(self) -> None:
        assert utilization_percentage(Decimal("10"), Decimal("-1")) == Decimal("110")

    @pytest.mark.parametrize(
        ("percentage", "band"),
        [
            ("100", UtilizationBand.CRITICAL),
            ("90.0", UtilizationBand.CRITICAL),
            ("89.999", UtilizationBand.WARNING),
            ("75.0", UtilizationBand.WARNING),
            ("74.999", UtilizationBand.HEALTHY),
            ("0", UtilizationBand.HEALTHY),
        ],
    )
    def test_bands(self, percentage: str, band: UtilizationBand) -> None:
        assert UtilizationPolicy().classify(Decimal(percentage)) == band

    def test_custom_policy(self) -> None:
        policy = UtilizationPolicy(critical_at=Decimal("50"), warning_at=Decimal("25"))
        assert policy.classify(Decimal("60")) == UtilizationBand.CRITICAL
        assert policy.classify(Decimal("30")) == UtilizationBand.WARNING

    def test_summary_counts(self) -> None:
        entries = [
            _entry("E1", "1", entitlement="20"),  # 95%
            _entry("E2", "4", entitlement="20"),  # 80%
            _entry("E3", "15", entitlement="20"),  # 25%
            _entry("E4", "3", entitlement="0"),  # no entitlement
        ]
        summary = summarize_utilization(entries)
        assert [item.band for item in summary.items] == [
            UtilizationBand.CRITICAL,
            UtilizationBand.WARNING,
            UtilizationBand.HEALTHY,
            UtilizationBand.HEALTHY,
        ]
        assert summary.counts == {
            UtilizationBand.CRITICAL: 1,
            UtilizationBand.WARNING: 1,
            UtilizationBand.HEALTHY: 2,
        }
        assert summary.total_entitlement == Decimal("60")
        assert summary.total_balance == Decimal("23")


# ---------------------------------------------------------------------------
# Low-balance warnings
# ---------------------------------------------------------------------------


class TestThresholds:
    def test_severity_counts_for_balances(self) -> None:
        counts = summarize_severity([Decimal("1.0"), Decimal("4.0"), Decimal("6.0")])
        assert counts == {
            BalanceSeverity.CRITICAL: 1,
            BalanceSeverity.WARNING: 1,
            BalanceSeverity.LOW: 1,
        }

    @pytest.mark.parametrize(
        ("balance", "severity"),
        [
            ("-3", BalanceSeverity.CRITICAL),
            ("2", BalanceSeverity.CRITICAL),
            ("2.001", BalanceSeverity.WARNING),
            ("5", BalanceSeverity.WARNING),
            ("5.001", BalanceSeverity.LOW),
        ],
    )
    def test_band_edges(self, balance: str, severity: BalanceSeverity) -> None:
        assert ThresholdPolicy().classify(Decimal(balance)) == severity

    def test_warnings_only_at_or_below_threshold(self) -> None:
        entries = [_entry("E1", "4"), _entry("E2", "1"), _entry("E3", "6"), _entry("E4", "5")]
        warnings = low_balance_warnings(entries, Decimal("5"))

        assert [w.entry.employee.employee_code for w in warnings] == ["E2", "E1", "E4"]
        assert [w.severity for w in warnings] == [
            BalanceSeverity.CRITICAL,
            BalanceSeverity.WARNING,
            BalanceSeverity.WARNING,
        ]
        assert severity_counts(warnings) == {
            BalanceSeverity.CRITICAL: 1,
            BalanceSeverity.WARNING: 2,
            BalanceSeverity.LOW: 0,
        }

    def test_threshold_above_warning_band_reports_low(self) -> None:
        warnings = low_balance_warnings([_entry("E1", "8")], Decimal("10"))
        assert warnings[0].severity == BalanceSeverity.LOW
