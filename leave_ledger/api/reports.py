# ruff: noqa: B008, TC001
from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Query

from leave_ledger.db import SessionDep
from leave_ledger.schemas.report import BalanceReportResponse, PeriodSummaryResponse, WarningReportResponse
from leave_ledger.services import report as report_service
from leave_ledger.services.period import MonthPeriod

reports_router = APIRouter(
    prefix="/leave/reports",
    tags=["reports"],
)


@reports_router.get(
    "/period-summary",
    response_model=PeriodSummaryResponse,
)
async def get_period_summary(
    session: SessionDep,
    period: str = Query(description="Month as YYYY-MM or 'January 2025'"),
) -> PeriodSummaryResponse:
    """Balances for one month grouped by department."""
    return await report_service.get_period_summary(session, MonthPeriod.parse(period))


@reports_router.get(
    "/balances",
    response_model=BalanceReportResponse,
)
async def get_balance_report(
    session: SessionDep,
    year: int = Query(ge=1900, le=9999),
) -> BalanceReportResponse:
    """Latest balance per employee for a year, banded by utilization."""
    return await report_service.get_balance_report(session, year)


@reports_router.get(
    "/warnings",
    response_model=WarningReportResponse,
)
async def get_warning_report(
    session: SessionDep,
    threshold: Decimal | None = Query(default=None, ge=0),
) -> WarningReportResponse:
    """Employees whose latest balance is at or below the threshold."""
    return await report_service.get_warning_report(session, threshold)
