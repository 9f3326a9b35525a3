# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from leave_ledger.db import SessionDep
from leave_ledger.schemas.report import AnnualStatementResponse, LedgerResponse, ReconciliationResponse
from leave_ledger.services import report as report_service
from leave_ledger.services.period import MonthPeriod

employee_ledger_router = APIRouter(
    prefix="/leave/employees/{employee_id}",
    tags=["ledger"],
)


@employee_ledger_router.get("/ledger", response_model=LedgerResponse)
async def get_employee_ledger(
    employee_id: uuid.UUID,
    session: SessionDep,
    start: str = Query(description="First month, YYYY-MM"),
    end: str | None = Query(default=None, description="Last month, YYYY-MM; defaults to start"),
) -> LedgerResponse:
    """Rebuild the month-by-month ledger for an employee."""
    first = MonthPeriod.parse(start)
    last = MonthPeriod.parse(end) if end is not None else first
    return await report_service.get_employee_ledger(session, employee_id, first, last)


@employee_ledger_router.get("/statement", response_model=AnnualStatementResponse)
async def get_annual_statement(
    employee_id: uuid.UUID,
    session: SessionDep,
    year: int = Query(ge=1900, le=9999),
) -> AnnualStatementResponse:
    """Line-by-line leave statement for a year."""
    return await report_service.get_annual_statement(session, employee_id, year)


@employee_ledger_router.get("/reconciliation", response_model=ReconciliationResponse)
async def reconcile_employee(
    employee_id: uuid.UUID,
    session: SessionDep,
    year: int = Query(ge=1900, le=9999),
) -> ReconciliationResponse:
    """Check stored balance rows for a year against a rebuilt ledger."""
    return await report_service.reconcile_employee_year(session, employee_id, year)
