"""Period ledger builder.

Folds accruals and approved applications over a run of months, carrying the
running balance explicitly from one month to the next:

    balance_cf = balance_bf + days_accrued - days_taken + days_adjusted
    balance_bf[next month] = balance_cf[this month]

Within a month the accrual and any manual adjustment are credited before any
application is deducted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from leave_ledger.exceptions import PeriodOrderError, PeriodOutOfRangeError
from leave_ledger.models.enums import DiscrepancyKind, StatementLineKind
from leave_ledger.services.accrual import accrual_schedule
from leave_ledger.services.days import ZERO_DAYS, to_days
from leave_ledger.services.deduction import apply_deductions
from leave_ledger.services.period import MonthPeriod

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping, Sequence
    from datetime import date
    from decimal import Decimal

    from leave_ledger.services.deduction import ApprovedApplication, DeductionStep
    from leave_ledger.services.employee import EmployeeInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerRow:
    """Balance movement for one month."""

    period: MonthPeriod
    balance_bf: Decimal
    days_accrued: Decimal
    days_taken: Decimal
    balance_cf: Decimal
    days_adjusted: Decimal = ZERO_DAYS
    overdrawn: bool = False
    deductions: tuple[DeductionStep, ...] = field(default_factory=tuple)

    @classmethod
    def from_persisted(
        cls,
        period_start: date,
        balance_bf: Decimal,
        days_accrued: Decimal,
        days_taken: Decimal,
        balance_cf: Decimal,
        days_adjusted: Decimal = ZERO_DAYS,
    ) -> LedgerRow:
        """Wrap a stored balance row without recomputing anything."""
        return cls(
            period=MonthPeriod.containing(period_start),
            balance_bf=to_days(balance_bf),
            days_accrued=to_days(days_accrued),
            days_taken=to_days(days_taken),
            balance_cf=to_days(balance_cf),
            days_adjusted=to_days(days_adjusted),
            overdrawn=to_days(balance_cf) < 0,
        )

    @property
    def expected_cf(self) -> Decimal:
        """``balance_bf + days_accrued - days_taken + days_adjusted``."""
        return self.balance_bf + self.days_accrued - self.days_taken + self.days_adjusted

    @property
    def is_conserved(self) -> bool:
        return self.balance_cf == self.expected_cf


class PeriodLedger:
    """Lazy, restartable sequence of :class:`LedgerRow` for one employee.

    Inputs are validated up front so that iteration itself cannot fail.
    Each call to ``iter()`` replays the fold from the opening balance, so
    iterating twice yields equal rows.

    Raises:
        PeriodOrderError: if ``periods`` is not strictly ascending.
        PeriodOutOfRangeError: if an application starts outside every period.
        InvalidRateError: if the employee's accrual rate is negative.
    """

    def __init__(
        self,
        employee: EmployeeInfo,
        opening_balance: Decimal,
        periods: Sequence[MonthPeriod],
        applications: Iterable[ApprovedApplication] = (),
        accrual_overrides: Mapping[MonthPeriod, Decimal] | None = None,
        adjustments: Mapping[MonthPeriod, Decimal] | None = None,
    ) -> None:
        self.employee = employee
        self.opening_balance = to_days(opening_balance)
        self.periods: tuple[MonthPeriod, ...] = tuple(periods)
        _check_ascending(self.periods)

        self._accruals = accrual_schedule(employee, self.periods, accrual_overrides)
        self._adjustments = {period: to_days(days) for period, days in (adjustments or {}).items()}
        self._applications_by_period = _bucket_applications(applications, self.periods)

    def __iter__(self) -> Iterator[LedgerRow]:
        balance = self.opening_balance
        for period in self.periods:
            row = self._close_period(period, balance)
            balance = row.balance_cf
            yield row

    def __len__(self) -> int:
        return len(self.periods)

    def _close_period(self, period: MonthPeriod, balance_bf: Decimal) -> LedgerRow:
        accrued = self._accruals[period]
        adjusted = self._adjustments.get(period, ZERO_DAYS)
        # Manual adjustments are credited alongside the accrual, before any deduction.
        result = apply_deductions(balance_bf + accrued + adjusted, self._applications_by_period.get(period, ()))
        return LedgerRow(
            period=period,
            balance_bf=balance_bf,
            days_accrued=accrued,
            days_taken=result.days_taken,
            balance_cf=result.closing,
            days_adjusted=adjusted,
            overdrawn=result.went_negative or result.closing < 0,
            deductions=result.steps,
        )

    @property
    def closing_balance(self) -> Decimal:
        """Closing balance of the last period, or the opening balance if empty."""
        closing = self.opening_balance
        for row in self:
            closing = row.balance_cf
        return closing


def _check_ascending(periods: Sequence[MonthPeriod]) -> None:
    for earlier, later in zip(periods, periods[1:], strict=False):
        if later <= earlier:
            msg = f"Ledger periods must be strictly ascending: {later} follows {earlier}"
            raise PeriodOrderError(msg)


def _bucket_applications(
    applications: Iterable[ApprovedApplication],
    periods: Sequence[MonthPeriod],
) -> dict[MonthPeriod, list[ApprovedApplication]]:
    """Group applications by the month containing their ``date_from``."""
    known = set(periods)
    buckets: dict[MonthPeriod, list[ApprovedApplication]] = {}
    for application in applications:
        period = MonthPeriod.containing(application.date_from)
        if period not in known:
            first = periods[0] if periods else None
            last = periods[-1] if periods else None
            msg = (
                f"Application {application.id} starts on {application.date_from.isoformat()}, "
                f"outside the ledger range {first} to {last}"
            )
            raise PeriodOutOfRangeError(msg)
        buckets.setdefault(period, []).append(application)
    return buckets


def build_ledger(
    employee: EmployeeInfo,
    opening_balance: Decimal,
    periods: Sequence[MonthPeriod],
    applications: Iterable[ApprovedApplication] = (),
    accrual_overrides: Mapping[MonthPeriod, Decimal] | None = None,
    adjustments: Mapping[MonthPeriod, Decimal] | None = None,
) -> list[LedgerRow]:
    """Build and materialize the ledger for ``periods``."""
    return list(PeriodLedger(employee, opening_balance, periods, applications, accrual_overrides, adjustments))


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Discrepancy:
    """A persisted balance row that disagrees with the ledger invariants."""

    period: MonthPeriod
    kind: DiscrepancyKind
    expected: Decimal
    actual: Decimal

    @property
    def difference(self) -> Decimal:
        return self.actual - self.expected


def reconcile(
    persisted: Sequence[LedgerRow],
    rebuilt: Sequence[LedgerRow] = (),
) -> list[Discrepancy]:
    """Check stored rows for conservation, continuity and agreement with a rebuild.

    ``persisted`` must be in ascending period order. Continuity is only
    checked between rows for consecutive months; a gap is not itself a
    discrepancy. Rows are compared against ``rebuilt`` by period.
    """
    discrepancies: list[Discrepancy] = []
    rebuilt_by_period = {row.period: row for row in rebuilt}

    previous: LedgerRow | None = None
    for row in persisted:
        if not row.is_conserved:
            discrepancies.append(
                Discrepancy(row.period, DiscrepancyKind.CONSERVATION, row.expected_cf, row.balance_cf)
            )

        if previous is not None and previous.period.next() == row.period and row.balance_bf != previous.balance_cf:
            discrepancies.append(
                Discrepancy(row.period, DiscrepancyKind.CONTINUITY, previous.balance_cf, row.balance_bf)
            )

        expected = rebuilt_by_period.get(row.period)
        if expected is not None:
            if row.days_taken != expected.days_taken:
                discrepancies.append(
                    Discrepancy(row.period, DiscrepancyKind.DAYS_TAKEN_MISMATCH, expected.days_taken, row.days_taken)
                )
            if row.balance_cf != expected.balance_cf:
                discrepancies.append(
                    Discrepancy(row.period, DiscrepancyKind.BALANCE_MISMATCH, expected.balance_cf, row.balance_cf)
                )
        previous = row

    for discrepancy in discrepancies:
        logger.warning(
            "Leave balance discrepancy period=%s kind=%s expected=%s actual=%s",
            discrepancy.period,
            discrepancy.kind,
            discrepancy.expected,
            discrepancy.actual,
        )
    return discrepancies


# ---------------------------------------------------------------------------
# Annual statement
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StatementLine:
    """One printed line of a leave statement with the balance after it."""

    kind: StatementLineKind
    period: MonthPeriod
    description: str
    balance: Decimal
    date_from: date | None = None
    date_to: date | None = None
    leave_type: str | None = None
    days_accrued: Decimal | None = None
    days_taken: Decimal | None = None
    days_adjusted: Decimal | None = None


@dataclass(frozen=True)
class Statement:
    """Line-by-line statement over a run of ledger rows."""

    opening_balance: Decimal
    lines: tuple[StatementLine, ...]
    total_accrued: Decimal
    total_taken: Decimal
    closing_balance: Decimal
    total_adjusted: Decimal = ZERO_DAYS


_DESCRIPTION_LIMIT = 30


def build_statement(rows: Iterable[LedgerRow]) -> Statement:
    """Expand ledger rows into statement lines.

    Each month contributes an accrual line, an adjustment line when the
    month carries a non-zero manual adjustment, and one line per application
    in deduction order. Every line shows the running balance.
    """
    materialized = list(rows)
    if not materialized:
        return Statement(ZERO_DAYS, (), ZERO_DAYS, ZERO_DAYS, ZERO_DAYS, ZERO_DAYS)

    first, last = materialized[0], materialized[-1]
    lines = [
        StatementLine(
            kind=StatementLineKind.OPENING,
            period=first.period,
            description="BALANCE B/F",
            balance=first.balance_bf,
        )
    ]
    total_accrued = ZERO_DAYS
    total_taken = ZERO_DAYS
    total_adjusted = ZERO_DAYS

    for row in materialized:
        running = row.balance_bf + row.days_accrued
        total_accrued += row.days_accrued
        lines.append(
            StatementLine(
                kind=StatementLineKind.ACCRUAL,
                period=row.period,
                description="LEAVE ACCRUED",
                balance=running,
                date_from=row.period.start,
                date_to=row.period.end,
                days_accrued=row.days_accrued,
            )
        )
        if row.days_adjusted:
            running += row.days_adjusted
            total_adjusted += row.days_adjusted
            lines.append(
                StatementLine(
                    kind=StatementLineKind.ADJUSTMENT,
                    period=row.period,
                    description="LEAVE ADJUSTMENT",
                    balance=running,
                    date_from=row.period.start,
                    date_to=row.period.end,
                    days_adjusted=row.days_adjusted,
                )
            )
        for step in row.deductions:
            application = step.application
            total_taken += step.days
            lines.append(
                StatementLine(
                    kind=StatementLineKind.APPLICATION,
                    period=row.period,
                    description=(application.comments or "Leave")[:_DESCRIPTION_LIMIT],
                    balance=step.balance_after,
                    date_from=application.date_from,
                    date_to=application.date_to,
                    leave_type=application.leave_type,
                    days_taken=step.days,
                )
            )

    lines.append(
        StatementLine(
            kind=StatementLineKind.CLOSING,
            period=last.period,
            description="BALANCE C/D",
            balance=last.balance_cf,
        )
    )
    return Statement(
        opening_balance=first.balance_bf,
        lines=tuple(lines),
        total_accrued=total_accrued,
        total_taken=total_taken,
        closing_balance=last.balance_cf,
        total_adjusted=total_adjusted,
    )
