from __future__ import annotations

import enum


class LeaveType(enum.StrEnum):
    """Kind of leave recorded on an application."""

    ORDINARY = "ORDINARY"
    SICK = "SICK"
    STUDY = "STUDY"
    MATERNITY = "MATERNITY"
    ANNUAL = "ANNUAL"
    FORCED = "FORCED"
    SPECIAL = "SPECIAL"
    UNPAID = "UNPAID"
    OTHER = "OTHER"


class LeaveSource(enum.StrEnum):
    """Which pool an application draws from."""

    NORMAL = "NORMAL"
    LEAVE_BANK = "LEAVE_BANK"


class ApplicationStatus(enum.StrEnum):
    """Approval state of a leave application."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class UtilizationBand(enum.StrEnum):
    """Share of annual entitlement already consumed."""

    CRITICAL = "critical"
    WARNING = "warning"
    HEALTHY = "healthy"


class BalanceSeverity(enum.StrEnum):
    """How close a remaining balance is to exhaustion, in absolute days."""

    CRITICAL = "critical"
    WARNING = "warning"
    LOW = "low"


class StatementLineKind(enum.StrEnum):
    """Line type on an annual leave statement."""

    OPENING = "OPENING"
    ACCRUAL = "ACCRUAL"
    ADJUSTMENT = "ADJUSTMENT"
    APPLICATION = "APPLICATION"
    CLOSING = "CLOSING"


class DiscrepancyKind(enum.StrEnum):
    """Why a persisted balance row failed reconciliation."""

    CONSERVATION = "CONSERVATION"
    CONTINUITY = "CONTINUITY"
    DAYS_TAKEN_MISMATCH = "DAYS_TAKEN_MISMATCH"
    BALANCE_MISMATCH = "BALANCE_MISMATCH"


class WorkWeek(enum.StrEnum):
    """Working-days policy used to count leave days."""

    FIVE_DAY = "5_day"
    SIX_DAY = "6_day"
    SEVEN_DAY = "7_day"


class ExcludedDayKind(enum.StrEnum):
    """Reason a calendar day was excluded from a leave duration."""

    WEEKEND = "weekend"
    PUBLIC_HOLIDAY = "public_holiday"
    CUSTOM_HOLIDAY = "custom_holiday"
