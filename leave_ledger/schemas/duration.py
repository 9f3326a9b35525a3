# ruff: noqa: TC003
from __future__ import annotations

from datetime import date
from typing import Self

from pydantic import BaseModel, Field, model_validator

from leave_ledger.models.enums import ExcludedDayKind, WorkWeek


class WorkingDaysRequest(BaseModel):
    """Request body for a leave duration calculation.

    Unset policy fields fall back to the configured defaults.
    """

    start_date: date
    end_date: date
    working_days_policy: WorkWeek | None = None
    exclude_saturdays: bool | None = None
    exclude_sundays: bool | None = None
    exclude_public_holidays: bool | None = None
    custom_holidays: list[date] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.end_date < self.start_date:
            msg = "end_date must be >= start_date"
            raise ValueError(msg)
        return self


class ExcludedDayResponse(BaseModel):
    date: date
    kind: ExcludedDayKind
    name: str


class WorkingDaysPolicyResponse(BaseModel):
    working_days_policy: WorkWeek
    exclude_saturdays: bool
    exclude_sundays: bool
    exclude_public_holidays: bool


class WorkingDaysResponse(BaseModel):
    """Breakdown of a date range into chargeable leave days."""

    start_date: date
    end_date: date
    total_days: int
    working_days: int
    weekend_days: int
    public_holidays: int
    custom_holidays: int
    excluded_dates: list[ExcludedDayResponse]
    policy: WorkingDaysPolicyResponse
