"""Roll-ups over employees' closing balances: department totals, utilization and warnings."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from leave_ledger.models.enums import BalanceSeverity, UtilizationBand
from leave_ledger.services.days import ZERO_DAYS, to_days

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from leave_ledger.services.employee import EmployeeInfo
    from leave_ledger.services.ledger import LedgerRow

_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class EmployeeBalance:
    """An employee paired with the balance row being reported."""

    employee: EmployeeInfo
    row: LedgerRow

    @property
    def department(self) -> str:
        return self.employee.department_key


@dataclass(frozen=True)
class BalanceTotals:
    """Column sums of a set of balance rows."""

    balance_bf: Decimal = ZERO_DAYS
    days_accrued: Decimal = ZERO_DAYS
    days_taken: Decimal = ZERO_DAYS
    balance_cf: Decimal = ZERO_DAYS
    days_adjusted: Decimal = ZERO_DAYS

    def __add__(self, other: BalanceTotals) -> BalanceTotals:
        return BalanceTotals(
            balance_bf=self.balance_bf + other.balance_bf,
            days_accrued=self.days_accrued + other.days_accrued,
            days_taken=self.days_taken + other.days_taken,
            balance_cf=self.balance_cf + other.balance_cf,
            days_adjusted=self.days_adjusted + other.days_adjusted,
        )

    @classmethod
    def of(cls, row: LedgerRow) -> BalanceTotals:
        return cls(row.balance_bf, row.days_accrued, row.days_taken, row.balance_cf, row.days_adjusted)


def sum_totals(items: Iterable[BalanceTotals]) -> BalanceTotals:
    total = BalanceTotals()
    for item in items:
        total = total + item
    return total


@dataclass(frozen=True)
class DepartmentSummary:
    """Subtotals for one department."""

    department: str
    entries: tuple[EmployeeBalance, ...]
    totals: BalanceTotals

    @property
    def employee_count(self) -> int:
        return len(self.entries)


def summarize_by_department(entries: Iterable[EmployeeBalance]) -> list[DepartmentSummary]:
    """Group entries by department and subtotal each group.

    Departments are returned in name order; entries keep their input order
    within a department.
    """
    groups: dict[str, list[EmployeeBalance]] = {}
    for entry in entries:
        groups.setdefault(entry.department, []).append(entry)

    return [
        DepartmentSummary(
            department=name,
            entries=tuple(groups[name]),
            totals=sum_totals(BalanceTotals.of(e.row) for e in groups[name]),
        )
        for name in sorted(groups)
    ]


def grand_total(summaries: Iterable[DepartmentSummary]) -> BalanceTotals:
    """Sum department subtotals into a single total."""
    return sum_totals(s.totals for s in summaries)


# ---------------------------------------------------------------------------
# Utilization
# ---------------------------------------------------------------------------


def utilization_percentage(entitlement: Decimal, balance_cf: Decimal) -> Decimal:
    """Percentage of the annual entitlement already used.

    An employee with no entitlement has used 0% of it. The value can exceed
    100 when the balance is overdrawn.
    """
    if entitlement <= 0:
        return Decimal("0")
    return (entitlement - balance_cf) / entitlement * _HUNDRED


@dataclass(frozen=True)
class UtilizationPolicy:
    """Percent bands: ``>= critical_at`` is critical, ``>= warning_at`` is warning."""

    critical_at: Decimal = Decimal("90")
    warning_at: Decimal = Decimal("75")

    def classify(self, percentage: Decimal) -> UtilizationBand:
        if percentage >= self.critical_at:
            return UtilizationBand.CRITICAL
        if percentage >= self.warning_at:
            return UtilizationBand.WARNING
        return UtilizationBand.HEALTHY


@dataclass(frozen=True)
class EmployeeUtilization:
    entry: EmployeeBalance
    percentage: Decimal
    band: UtilizationBand


@dataclass(frozen=True)
class UtilizationSummary:
    items: tuple[EmployeeUtilization, ...]
    counts: dict[UtilizationBand, int]
    total_entitlement: Decimal
    total_taken: Decimal
    total_balance: Decimal


def summarize_utilization(
    entries: Iterable[EmployeeBalance],
    policy: UtilizationPolicy | None = None,
) -> UtilizationSummary:
    """Classify every entry's utilization and count employees per band."""
    policy = policy or UtilizationPolicy()
    items: list[EmployeeUtilization] = []
    for entry in entries:
        pct = utilization_percentage(entry.employee.leave_entitlement, entry.row.balance_cf)
        items.append(EmployeeUtilization(entry=entry, percentage=pct, band=policy.classify(pct)))

    counts = Counter(item.band for item in items)
    return UtilizationSummary(
        items=tuple(items),
        counts={band: counts.get(band, 0) for band in UtilizationBand},
        total_entitlement=sum((to_days(i.entry.employee.leave_entitlement) for i in items), ZERO_DAYS),
        total_taken=sum((i.entry.row.days_taken for i in items), ZERO_DAYS),
        total_balance=sum((i.entry.row.balance_cf for i in items), ZERO_DAYS),
    )


# ---------------------------------------------------------------------------
# Low-balance warnings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ThresholdPolicy:
    """Day bands: ``<= critical_max`` is critical, ``<= warning_max`` is warning, above is low."""

    critical_max: Decimal = Decimal("2")
    warning_max: Decimal = Decimal("5")

    def classify(self, balance: Decimal) -> BalanceSeverity:
        if balance <= self.critical_max:
            return BalanceSeverity.CRITICAL
        if balance <= self.warning_max:
            return BalanceSeverity.WARNING
        return BalanceSeverity.LOW


def summarize_severity(
    balances: Iterable[Decimal],
    policy: ThresholdPolicy | None = None,
) -> dict[BalanceSeverity, int]:
    """Count balances per severity band."""
    policy = policy or ThresholdPolicy()
    counts = Counter(policy.classify(balance) for balance in balances)
    return {severity: counts.get(severity, 0) for severity in BalanceSeverity}


@dataclass(frozen=True)
class LowBalanceWarning:
    entry: EmployeeBalance
    severity: BalanceSeverity


def low_balance_warnings(
    entries: Iterable[EmployeeBalance],
    threshold: Decimal,
    policy: ThresholdPolicy | None = None,
) -> list[LowBalanceWarning]:
    """Entries whose closing balance is at or below ``threshold``, lowest first."""
    policy = policy or ThresholdPolicy()
    flagged = [entry for entry in entries if entry.row.balance_cf <= threshold]
    flagged.sort(key=lambda e: (e.row.balance_cf, e.employee.employee_code))
    return [LowBalanceWarning(entry=e, severity=policy.classify(e.row.balance_cf)) for e in flagged]


def severity_counts(warnings: Sequence[LowBalanceWarning]) -> dict[BalanceSeverity, int]:
    counts = Counter(w.severity for w in warnings)
    return {severity: counts.get(severity, 0) for severity in BalanceSeverity}
