# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from leave_ledger.models.enums import BalanceSeverity, DiscrepancyKind, StatementLineKind, UtilizationBand


class EmployeeRef(BaseModel):
    """Employee identity as printed on reports."""

    id: uuid.UUID
    employee_code: str
    name: str
    department: str


class BalanceTotalsResponse(BaseModel):
    """Column totals over a set of balance rows."""

    balance_bf: Decimal
    days_accrued: Decimal
    days_taken: Decimal
    days_adjusted: Decimal
    balance_cf: Decimal


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------


class DeductionResponse(BaseModel):
    """An approved application applied within a ledger month."""

    application_id: uuid.UUID
    leave_type: str
    date_from: date
    date_to: date
    days: Decimal
    balance_after: Decimal


class LedgerRowResponse(BaseModel):
    """Balance movement for one month."""

    period: str
    period_label: str
    balance_bf: Decimal
    days_accrued: Decimal
    days_taken: Decimal
    days_adjusted: Decimal
    balance_cf: Decimal
    overdrawn: bool
    deductions: list[DeductionResponse]


class LedgerResponse(BaseModel):
    """Rebuilt month-by-month ledger for one employee."""

    employee: EmployeeRef
    opening_balance: Decimal
    closing_balance: Decimal
    items: list[LedgerRowResponse]
    total: int


class DiscrepancyResponse(BaseModel):
    period: str
    kind: DiscrepancyKind
    expected: Decimal
    actual: Decimal
    difference: Decimal


class ReconciliationResponse(BaseModel):
    """Persisted balance rows checked against the rebuilt ledger."""

    employee: EmployeeRef
    year: int
    checked_periods: int
    is_consistent: bool
    discrepancies: list[DiscrepancyResponse]


# ---------------------------------------------------------------------------
# Annual statement
# ---------------------------------------------------------------------------


class StatementLineResponse(BaseModel):
    kind: StatementLineKind
    period: str
    description: str
    date_from: date | None
    date_to: date | None
    leave_type: str | None
    days_accrued: Decimal | None
    days_taken: Decimal | None
    days_adjusted: Decimal | None
    balance: Decimal


class AnnualStatementResponse(BaseModel):
    """Line-by-line leave statement for one employee and year."""

    employee: EmployeeRef
    year: int
    leave_entitlement: Decimal
    opening_balance: Decimal
    total_accrued: Decimal
    total_taken: Decimal
    total_adjusted: Decimal
    closing_balance: Decimal
    lines: list[StatementLineResponse]


# ---------------------------------------------------------------------------
# Period summary
# ---------------------------------------------------------------------------


class PeriodSummaryRow(BaseModel):
    employee: EmployeeRef
    balance_bf: Decimal
    days_accrued: Decimal
    days_taken: Decimal
    days_adjusted: Decimal
    balance_cf: Decimal


class DepartmentSummaryResponse(BaseModel):
    department: str
    employee_count: int
    items: list[PeriodSummaryRow]
    totals: BalanceTotalsResponse


class PeriodSummaryResponse(BaseModel):
    """Balances for one month grouped by department."""

    period: str
    period_label: str
    departments: list[DepartmentSummaryResponse]
    grand_total: BalanceTotalsResponse
    employee_count: int


# ---------------------------------------------------------------------------
# Balances / utilization
# ---------------------------------------------------------------------------


class UtilizationItem(BaseModel):
    employee: EmployeeRef
    period: str
    leave_entitlement: Decimal
    days_taken: Decimal
    balance_cf: Decimal
    utilization_percentage: Decimal
    band: UtilizationBand


class BalanceReportResponse(BaseModel):
    """Latest balance per employee for a year, with utilization bands."""

    year: int
    items: list[UtilizationItem]
    counts: dict[UtilizationBand, int]
    total_entitlement: Decimal
    total_taken: Decimal
    total_balance: Decimal
    total: int


# ---------------------------------------------------------------------------
# Low-balance warnings
# ---------------------------------------------------------------------------


class WarningItem(BaseModel):
    employee: EmployeeRef
    period: str
    balance_cf: Decimal
    severity: BalanceSeverity


class WarningReportResponse(BaseModel):
    """Active employees whose latest balance is at or below the threshold."""

    threshold: Decimal
    items: list[WarningItem]
    counts: dict[BalanceSeverity, int]
    total: int
