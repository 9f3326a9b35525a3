# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from leave_ledger.models.base import DaysField, TimestampMixin, UUIDBase
from leave_ledger.models.enums import ApplicationStatus, LeaveSource


class LeaveApplication(UUIDBase, TimestampMixin, table=True):
    """A leave application; immutable once approved."""

    __tablename__ = "leave_application"
    __table_args__ = (sa.Index("ix_application_employee_date", "employee_id", "date_from"),)

    employee_id: uuid.UUID = Field(index=True)
    leave_type: str = Field(max_length=50)
    leave_source: str = Field(default=LeaveSource.NORMAL, max_length=50)
    date_from: date
    date_to: date
    total_days: Decimal = DaysField()
    status: str = Field(
        default=ApplicationStatus.PENDING,
        max_length=50,
        index=True,
        sa_column_kwargs={"server_default": "PENDING"},
    )
    comments: str | None = Field(default=None, max_length=1000)
