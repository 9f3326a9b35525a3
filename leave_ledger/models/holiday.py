# ruff: noqa: TC003
from __future__ import annotations

import datetime

from sqlmodel import Field

from leave_ledger.models.base import UUIDBase


class CompanyHoliday(UUIDBase, table=True):
    """A company-specific non-working day excluded from leave durations."""

    __tablename__ = "company_holiday"

    date: datetime.date = Field(unique=True)
    name: str = Field(max_length=255)
