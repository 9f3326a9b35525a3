from sqlmodel import SQLModel

from leave_ledger.models.application import LeaveApplication
from leave_ledger.models.balance import LeaveBalancePeriod
from leave_ledger.models.base import TimestampMixin, UUIDBase
from leave_ledger.models.enums import (
    ApplicationStatus,
    BalanceSeverity,
    DiscrepancyKind,
    ExcludedDayKind,
    LeaveSource,
    LeaveType,
    StatementLineKind,
    UtilizationBand,
    WorkWeek,
)
from leave_ledger.models.holiday import CompanyHoliday

__all__ = [
    "ApplicationStatus",
    "BalanceSeverity",
    "CompanyHoliday",
    "DiscrepancyKind",
    "ExcludedDayKind",
    "LeaveApplication",
    "LeaveBalancePeriod",
    "LeaveSource",
    "LeaveType",
    "SQLModel",
    "StatementLineKind",
    "TimestampMixin",
    "UUIDBase",
    "UtilizationBand",
    "WorkWeek",
]
