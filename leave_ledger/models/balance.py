# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from leave_ledger.models.base import DaysField, UUIDBase


def _now_utc() -> datetime:
    return datetime.now(UTC)


class LeaveBalancePeriod(UUIDBase, table=True):
    """Persisted leave balance for one employee and one calendar month.

    Rows are written by the monthly accrual job and by leave approvals;
    this service only reads them.
    """

    __tablename__ = "leave_balance_period"
    __table_args__ = (
        sa.UniqueConstraint("employee_id", "period_start", name="uq_balance_employee_period"),
        sa.Index("ix_balance_period_start", "period_start"),
    )

    employee_id: uuid.UUID = Field(index=True)
    period_start: date
    balance_bf: Decimal = DaysField()
    days_accrued: Decimal = DaysField()
    days_taken: Decimal = DaysField()
    days_adjusted: Decimal = DaysField()
    balance_cf: Decimal = DaysField()
    updated_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=_now_utc,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now(), "onupdate": sa.func.now()},
    )
