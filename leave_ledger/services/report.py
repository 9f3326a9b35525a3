"""Reporting service: loads a balance snapshot and runs the ledger pipeline over it."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leave_ledger.config import get_settings
from leave_ledger.exceptions import EmployeeNotFoundError, PeriodOrderError
from leave_ledger.models.application import LeaveApplication
from leave_ledger.models.balance import LeaveBalancePeriod
from leave_ledger.models.enums import ApplicationStatus
from leave_ledger.schemas.report import (
    AnnualStatementResponse,
    BalanceReportResponse,
    BalanceTotalsResponse,
    DeductionResponse,
    DepartmentSummaryResponse,
    DiscrepancyResponse,
    EmployeeRef,
    LedgerResponse,
    LedgerRowResponse,
    PeriodSummaryResponse,
    PeriodSummaryRow,
    ReconciliationResponse,
    StatementLineResponse,
    UtilizationItem,
    WarningItem,
    WarningReportResponse,
)
from leave_ledger.services.aggregate import (
    EmployeeBalance,
    ThresholdPolicy,
    UtilizationPolicy,
    grand_total,
    low_balance_warnings,
    severity_counts,
    summarize_by_department,
    summarize_utilization,
)
from leave_ledger.services.days import to_days
from leave_ledger.services.deduction import ApprovedApplication
from leave_ledger.services.employee import get_employee_service
from leave_ledger.services.ledger import LedgerRow, PeriodLedger, build_statement, reconcile
from leave_ledger.services.period import MonthPeriod, month_range

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_ledger.config import Settings
    from leave_ledger.services.aggregate import BalanceTotals
    from leave_ledger.services.employee import EmployeeInfo

logger = logging.getLogger(__name__)

_PERCENT_QUANTUM = Decimal("0.01")


def utilization_policy(settings: Settings) -> UtilizationPolicy:
    return UtilizationPolicy(
        critical_at=settings.utilization_critical_pct,
        warning_at=settings.utilization_warning_pct,
    )


def threshold_policy(settings: Settings) -> ThresholdPolicy:
    return ThresholdPolicy(
        critical_max=settings.balance_critical_days,
        warning_max=settings.balance_warning_days,
    )


# ---------------------------------------------------------------------------
# Snapshot loading
# ---------------------------------------------------------------------------


def _to_ledger_row(record: LeaveBalancePeriod) -> LedgerRow:
    return LedgerRow.from_persisted(
        record.period_start,
        record.balance_bf,
        record.days_accrued,
        record.days_taken,
        record.balance_cf,
        record.days_adjusted,
    )


def _to_approved(application: LeaveApplication) -> ApprovedApplication:
    return ApprovedApplication(
        id=application.id,
        date_from=application.date_from,
        date_to=application.date_to,
        total_days=application.total_days,
        leave_type=application.leave_type,
        comments=application.comments,
    )


async def _load_balance_rows(
    session: AsyncSession,
    start_date: date,
    end_date: date,
    *,
    employee_id: uuid.UUID | None = None,
) -> list[LeaveBalancePeriod]:
    """Balance rows with ``period_start`` in ``[start_date, end_date]``, by employee then month."""
    filters = [
        col(LeaveBalancePeriod.period_start) >= start_date,
        col(LeaveBalancePeriod.period_start) <= end_date,
    ]
    if employee_id is not None:
        filters.append(col(LeaveBalancePeriod.employee_id) == employee_id)

    result = await session.execute(
        select(LeaveBalancePeriod)
        .where(*filters)
        .order_by(col(LeaveBalancePeriod.employee_id), col(LeaveBalancePeriod.period_start))
    )
    return list(result.scalars().all())


async def _load_latest_rows(
    session: AsyncSession,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
) -> dict[uuid.UUID, LeaveBalancePeriod]:
    """Most recent balance row per employee, optionally within a date window."""
    filters = []
    if start_date is not None:
        filters.append(col(LeaveBalancePeriod.period_start) >= start_date)
    if end_date is not None:
        filters.append(col(LeaveBalancePeriod.period_start) <= end_date)

    result = await session.execute(
        select(LeaveBalancePeriod).where(*filters).order_by(col(LeaveBalancePeriod.period_start))
    )
    latest: dict[uuid.UUID, LeaveBalancePeriod] = {}
    for record in result.scalars().all():
        latest[record.employee_id] = record
    return latest


async def _load_approved_applications(
    session: AsyncSession,
    employee_id: uuid.UUID,
    start_date: date,
    end_date: date,
) -> list[ApprovedApplication]:
    """Approved applications whose ``date_from`` lies in ``[start_date, end_date]``."""
    result = await session.execute(
        select(LeaveApplication).where(
            col(LeaveApplication.employee_id) == employee_id,
            col(LeaveApplication.status) == ApplicationStatus.APPROVED.value,
            col(LeaveApplication.date_from) >= start_date,
            col(LeaveApplication.date_from) <= end_date,
        )
    )
    return [_to_approved(a) for a in result.scalars().all()]


async def _opening_balance(
    session: AsyncSession,
    employee: EmployeeInfo,
    first: MonthPeriod,
    persisted: dict[MonthPeriod, LeaveBalancePeriod],
) -> Decimal:
    """Balance brought forward into ``first``.

    Uses the stored B/F for that month, else the C/F of the latest earlier
    month, else the employee's annual entitlement.
    """
    if first in persisted:
        return persisted[first].balance_bf

    result = await session.execute(
        select(LeaveBalancePeriod)
        .where(
            col(LeaveBalancePeriod.employee_id) == employee.id,
            col(LeaveBalancePeriod.period_start) < first.start,
        )
        .order_by(col(LeaveBalancePeriod.period_start).desc())
        .limit(1)
    )
    previous = result.scalar_one_or_none()
    if previous is not None:
        return previous.balance_cf
    return employee.leave_entitlement


async def _require_employee(employee_id: uuid.UUID) -> EmployeeInfo:
    employee = await get_employee_service().get_employee(employee_id)
    if employee is None:
        msg = f"Employee {employee_id} not found"
        raise EmployeeNotFoundError(msg)
    return employee


async def _employee_balances(records: list[LeaveBalancePeriod]) -> list[EmployeeBalance]:
    """Pair balance rows with employee records, skipping unknown employees."""
    service = get_employee_service()
    entries: list[EmployeeBalance] = []
    for record in records:
        employee = await service.get_employee(record.employee_id)
        if employee is None:
            logger.warning("Skipping balance row %s: employee %s not found", record.id, record.employee_id)
            continue
        entries.append(EmployeeBalance(employee=employee, row=_to_ledger_row(record)))
    return entries


async def rebuild_ledger(
    session: AsyncSession,
    employee: EmployeeInfo,
    first: MonthPeriod,
    last: MonthPeriod,
    records: list[LeaveBalancePeriod] | None = None,
) -> tuple[PeriodLedger, list[LeaveBalancePeriod]]:
    """Rebuild the ledger for ``first..last`` from one consistent read.

    Stored ``days_accrued`` values take precedence over the employee's
    current accrual rate, and stored ``days_adjusted`` values are replayed
    as manual adjustments. ``records`` may be passed when the stored rows
    for the range are already loaded. Returns the ledger together with the
    stored rows it was built from.
    """
    periods = month_range(first, last)
    if records is None:
        records = await _load_balance_rows(session, first.start, last.end, employee_id=employee.id)
    persisted = {MonthPeriod.containing(r.period_start): r for r in records}
    opening = await _opening_balance(session, employee, first, persisted)
    applications = await _load_approved_applications(session, employee.id, first.start, last.end)

    ledger = PeriodLedger(
        employee,
        opening,
        periods,
        applications,
        accrual_overrides={period: r.days_accrued for period, r in persisted.items()},
        adjustments={period: r.days_adjusted for period, r in persisted.items()},
    )
    logger.info(
        "Rebuilt ledger for employee=%s %s..%s: periods=%d applications=%d",
        employee.id,
        first,
        last,
        len(periods),
        len(applications),
    )
    return ledger, records


async def rebuild_stored_year(
    session: AsyncSession,
    employee: EmployeeInfo,
    year: int,
) -> tuple[PeriodLedger | None, list[LeaveBalancePeriod]]:
    """Rebuild the ledger over the months of ``year`` that have stored rows.

    The rebuild runs from the first stored month to the last, opening on
    the first stored B/F, so an employee who joined mid-year or a year that
    is still in progress is not padded with invented months. Returns
    ``None`` for the ledger when the year has no stored rows.
    """
    records = await _load_balance_rows(
        session, MonthPeriod(year, 1).start, MonthPeriod(year, 12).start, employee_id=employee.id
    )
    if not records:
        logger.info("No stored balances for employee=%s in %d", employee.id, year)
        return None, records

    first = MonthPeriod.containing(records[0].period_start)
    last = MonthPeriod.containing(records[-1].period_start)
    return await rebuild_ledger(session, employee, first, last, records)


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------


def _employee_ref(employee: EmployeeInfo) -> EmployeeRef:
    return EmployeeRef(
        id=employee.id,
        employee_code=employee.employee_code,
        name=employee.display_name,
        department=employee.department_key,
    )


def _totals_response(totals: BalanceTotals) -> BalanceTotalsResponse:
    return BalanceTotalsResponse(
        balance_bf=totals.balance_bf,
        days_accrued=totals.days_accrued,
        days_taken=totals.days_taken,
        days_adjusted=totals.days_adjusted,
        balance_cf=totals.balance_cf,
    )


def _ledger_row_response(row: LedgerRow) -> LedgerRowResponse:
    return LedgerRowResponse(
        period=str(row.period),
        period_label=row.period.label,
        balance_bf=row.balance_bf,
        days_accrued=row.days_accrued,
        days_taken=row.days_taken,
        days_adjusted=row.days_adjusted,
        balance_cf=row.balance_cf,
        overdrawn=row.overdrawn,
        deductions=[
            DeductionResponse(
                application_id=step.application.id,
                leave_type=step.application.leave_type,
                date_from=step.application.date_from,
                date_to=step.application.date_to,
                days=step.days,
                balance_after=step.balance_after,
            )
            for step in row.deductions
        ],
    )


# ---------------------------------------------------------------------------
# Employee ledger, statement and reconciliation
# ---------------------------------------------------------------------------


async def get_employee_ledger(
    session: AsyncSession,
    employee_id: uuid.UUID,
    first: MonthPeriod,
    last: MonthPeriod,
) -> LedgerResponse:
    """Month-by-month ledger for one employee."""
    if last < first:
        msg = f"Ledger end {last} precedes start {first}"
        raise PeriodOrderError(msg)
    employee = await _require_employee(employee_id)
    ledger, _ = await rebuild_ledger(session, employee, first, last)
    rows = list(ledger)

    return LedgerResponse(
        employee=_employee_ref(employee),
        opening_balance=ledger.opening_balance,
        closing_balance=ledger.closing_balance,
        items=[_ledger_row_response(row) for row in rows],
        total=len(rows),
    )


async def get_annual_statement(
    session: AsyncSession,
    employee_id: uuid.UUID,
    year: int,
) -> AnnualStatementResponse:
    """Leave statement over the stored months of ``year``."""
    employee = await _require_employee(employee_id)
    ledger, _ = await rebuild_stored_year(session, employee, year)
    statement = build_statement(ledger if ledger is not None else ())

    return AnnualStatementResponse(
        employee=_employee_ref(employee),
        year=year,
        leave_entitlement=to_days(employee.leave_entitlement),
        opening_balance=statement.opening_balance,
        total_accrued=statement.total_accrued,
        total_taken=statement.total_taken,
        total_adjusted=statement.total_adjusted,
        closing_balance=statement.closing_balance,
        lines=[
            StatementLineResponse(
                kind=line.kind,
                period=str(line.period),
                description=line.description,
                date_from=line.date_from,
                date_to=line.date_to,
                leave_type=line.leave_type,
                days_accrued=line.days_accrued,
                days_taken=line.days_taken,
                days_adjusted=line.days_adjusted,
                balance=line.balance,
            )
            for line in statement.lines
        ],
    )


async def reconcile_employee_year(
    session: AsyncSession,
    employee_id: uuid.UUID,
    year: int,
) -> ReconciliationResponse:
    """Compare an employee's stored rows for ``year`` with a fresh rebuild."""
    employee = await _require_employee(employee_id)
    ledger, records = await rebuild_stored_year(session, employee, year)
    discrepancies = reconcile([_to_ledger_row(r) for r in records], list(ledger) if ledger is not None else [])

    return ReconciliationResponse(
        employee=_employee_ref(employee),
        year=year,
        checked_periods=len(records),
        is_consistent=not discrepancies,
        discrepancies=[
            DiscrepancyResponse(
                period=str(d.period),
                kind=d.kind,
                expected=d.expected,
                actual=d.actual,
                difference=d.difference,
            )
            for d in discrepancies
        ],
    )


# ---------------------------------------------------------------------------
# Company-wide reports
# ---------------------------------------------------------------------------


async def get_period_summary(
    session: AsyncSession,
    period: MonthPeriod,
) -> PeriodSummaryResponse:
    """Stored balances for ``period`` grouped by department, with subtotals and a grand total."""
    records = await _load_balance_rows(session, period.start, period.start)
    entries = await _employee_balances(records)
    departments = summarize_by_department(entries)
    total = grand_total(departments)

    return PeriodSummaryResponse(
        period=str(period),
        period_label=period.label,
        departments=[
            DepartmentSummaryResponse(
                department=summary.department,
                employee_count=summary.employee_count,
                items=[
                    PeriodSummaryRow(
                        employee=_employee_ref(entry.employee),
                        balance_bf=entry.row.balance_bf,
                        days_accrued=entry.row.days_accrued,
                        days_taken=entry.row.days_taken,
                        days_adjusted=entry.row.days_adjusted,
                        balance_cf=entry.row.balance_cf,
                    )
                    for entry in summary.entries
                ],
                totals=_totals_response(summary.totals),
            )
            for summary in departments
        ],
        grand_total=_totals_response(total),
        employee_count=len(entries),
    )


async def get_balance_report(
    session: AsyncSession,
    year: int,
) -> BalanceReportResponse:
    """Latest balance per employee within ``year`` with utilization bands."""
    settings = get_settings()
    latest = await _load_latest_rows(
        session, start_date=MonthPeriod(year, 1).start, end_date=MonthPeriod(year, 12).start
    )
    entries = await _employee_balances(list(latest.values()))
    entries.sort(key=lambda e: e.employee.employee_code)
    summary = summarize_utilization(entries, utilization_policy(settings))

    return BalanceReportResponse(
        year=year,
        items=[
            UtilizationItem(
                employee=_employee_ref(item.entry.employee),
                period=str(item.entry.row.period),
                leave_entitlement=to_days(item.entry.employee.leave_entitlement),
                days_taken=item.entry.row.days_taken,
                balance_cf=item.entry.row.balance_cf,
                utilization_percentage=item.percentage.quantize(_PERCENT_QUANTUM, rounding=ROUND_HALF_UP),
                band=item.band,
            )
            for item in summary.items
        ],
        counts=summary.counts,
        total_entitlement=summary.total_entitlement,
        total_taken=summary.total_taken,
        total_balance=summary.total_balance,
        total=len(summary.items),
    )


async def get_warning_report(
    session: AsyncSession,
    threshold: Decimal | None = None,
) -> WarningReportResponse:
    """Active employees whose latest balance is at or below ``threshold`` days."""
    settings = get_settings()
    if threshold is None:
        threshold = settings.low_balance_threshold_days

    latest = await _load_latest_rows(session)
    entries = [e for e in await _employee_balances(list(latest.values())) if e.employee.is_active]
    warnings = low_balance_warnings(entries, threshold, threshold_policy(settings))
    logger.info("Low balance report: threshold=%s flagged=%d of %d", threshold, len(warnings), len(entries))

    return WarningReportResponse(
        threshold=threshold,
        items=[
            WarningItem(
                employee=_employee_ref(w.entry.employee),
                period=str(w.entry.row.period),
                balance_cf=w.entry.row.balance_cf,
                severity=w.severity,
            )
            for w in warnings
        ],
        counts=severity_counts(warnings),
        total=len(warnings),
    )
