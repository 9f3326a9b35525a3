# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter

from leave_ledger.config import get_settings
from leave_ledger.db import SessionDep
from leave_ledger.models.enums import WorkWeek
from leave_ledger.schemas.duration import (
    ExcludedDayResponse,
    WorkingDaysPolicyResponse,
    WorkingDaysRequest,
    WorkingDaysResponse,
)
from leave_ledger.services.duration import WorkingDaysOptions, calculate_leave_days

calculations_router = APIRouter(
    prefix="/leave",
    tags=["calculations"],
)


def _resolve_options(payload: WorkingDaysRequest) -> WorkingDaysOptions:
    """Overlay request fields on the configured working-days defaults."""
    defaults = WorkingDaysOptions.from_settings(get_settings())
    return WorkingDaysOptions(
        work_week=WorkWeek(payload.working_days_policy or defaults.work_week),
        exclude_saturdays=defaults.exclude_saturdays if payload.exclude_saturdays is None else payload.exclude_saturdays,
        exclude_sundays=defaults.exclude_sundays if payload.exclude_sundays is None else payload.exclude_sundays,
        exclude_public_holidays=(
            defaults.exclude_public_holidays
            if payload.exclude_public_holidays is None
            else payload.exclude_public_holidays
        ),
    )


@calculations_router.post("/working-days", response_model=WorkingDaysResponse)
async def calculate_working_days(
    payload: WorkingDaysRequest,
    session: SessionDep,
) -> WorkingDaysResponse:
    """Count chargeable leave days between two dates."""
    options = _resolve_options(payload)
    breakdown = await calculate_leave_days(
        session,
        payload.start_date,
        payload.end_date,
        options,
        extra_holidays=payload.custom_holidays,
    )
    return WorkingDaysResponse(
        start_date=breakdown.start_date,
        end_date=breakdown.end_date,
        total_days=breakdown.total_days,
        working_days=breakdown.working_days,
        weekend_days=breakdown.weekend_days,
        public_holidays=breakdown.public_holidays,
        custom_holidays=breakdown.custom_holidays,
        excluded_dates=[ExcludedDayResponse(date=d.date, kind=d.kind, name=d.name) for d in breakdown.excluded_dates],
        policy=WorkingDaysPolicyResponse(
            working_days_policy=options.work_week,
            exclude_saturdays=options.exclude_saturdays,
            exclude_sundays=options.exclude_sundays,
            exclude_public_holidays=options.exclude_public_holidays,
        ),
    )
