"""Application deduction processor.

Applies approved leave applications against a running balance. Overdrawn
balances are valid data: they are flagged, never rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from leave_ledger.services.days import ZERO_DAYS, to_days

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterable
    from datetime import date
    from decimal import Decimal


@dataclass(frozen=True)
class ApprovedApplication:
    """The slice of an approved leave application the ledger needs."""

    id: uuid.UUID
    date_from: date
    date_to: date
    total_days: Decimal
    leave_type: str = "ORDINARY"
    comments: str | None = None

    @property
    def sort_key(self) -> tuple[date, uuid.UUID]:
        return (self.date_from, self.id)


@dataclass(frozen=True)
class DeductionStep:
    """One application applied to the running balance."""

    application: ApprovedApplication
    days: Decimal
    balance_after: Decimal


@dataclass(frozen=True)
class DeductionResult:
    """Outcome of deducting a batch of applications from an opening balance."""

    opening: Decimal
    closing: Decimal
    days_taken: Decimal
    went_negative: bool
    steps: tuple[DeductionStep, ...] = field(default_factory=tuple)


def order_applications(applications: Iterable[ApprovedApplication]) -> list[ApprovedApplication]:
    """Sort by ``date_from`` ascending, then by application id."""
    return sorted(applications, key=lambda a: a.sort_key)


def apply_deductions(
    opening: Decimal,
    applications: Iterable[ApprovedApplication],
) -> DeductionResult:
    """Subtract each application's ``total_days`` from ``opening`` in date order.

    ``went_negative`` is set if the opening balance is already below zero or
    the running balance drops below zero after any application, even if a
    later step would bring it back up.
    """
    running = to_days(opening)
    taken = ZERO_DAYS
    went_negative = running < 0
    steps: list[DeductionStep] = []

    for application in order_applications(applications):
        days = to_days(application.total_days)
        running -= days
        taken += days
        if running < 0:
            went_negative = True
        steps.append(DeductionStep(application=application, days=days, balance_after=running))

    return DeductionResult(
        opening=to_days(opening),
        closing=running,
        days_taken=taken,
        went_negative=went_negative,
        steps=tuple(steps),
    )
