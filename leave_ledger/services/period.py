"""Calendar-month value object used as the ledger's period key."""

from __future__ import annotations

import re
from calendar import month_name, monthrange
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING

from leave_ledger.exceptions import InvalidPeriodError

if TYPE_CHECKING:
    from collections.abc import Iterator

_ISO_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")
_MONTH_NUMBERS = {name.lower(): number for number, name in enumerate(month_name) if name}


@dataclass(frozen=True, order=True)
class MonthPeriod:
    """A calendar month. Ordered chronologically."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            msg = f"Month must be between 1 and 12, got {self.month}"
            raise InvalidPeriodError(msg)
        if not 1 <= self.year <= 9999:
            msg = f"Year out of range: {self.year}"
            raise InvalidPeriodError(msg)

    @classmethod
    def containing(cls, day: date) -> MonthPeriod:
        """Return the month that contains ``day``."""
        return cls(day.year, day.month)

    @classmethod
    def parse(cls, value: str) -> MonthPeriod:
        """Parse ``"2025-01"`` or a label such as ``"January 2025"``."""
        text = value.strip()
        match = _ISO_MONTH.match(text)
        if match:
            return cls(int(match.group(1)), int(match.group(2)))

        parts = text.split()
        if len(parts) == 2 and parts[0].lower() in _MONTH_NUMBERS and parts[1].isdigit():
            return cls(int(parts[1]), _MONTH_NUMBERS[parts[0].lower()])

        msg = f"Unrecognised period {value!r}; expected YYYY-MM or 'Month YYYY'"
        raise InvalidPeriodError(msg)

    @property
    def start(self) -> date:
        """First day of the month."""
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        """Last day of the month."""
        _, days_in_month = monthrange(self.year, self.month)
        return date(self.year, self.month, days_in_month)

    @property
    def label(self) -> str:
        """Human-readable label, e.g. ``January 2025``."""
        return f"{month_name[self.month]} {self.year}"

    def contains(self, day: date | datetime) -> bool:
        """Whether ``day`` falls within this month."""
        return day.year == self.year and day.month == self.month

    def next(self) -> MonthPeriod:
        if self.month == 12:
            return MonthPeriod(self.year + 1, 1)
        return MonthPeriod(self.year, self.month + 1)

    def previous(self) -> MonthPeriod:
        if self.month == 1:
            return MonthPeriod(self.year - 1, 12)
        return MonthPeriod(self.year, self.month - 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def month_range(first: MonthPeriod, last: MonthPeriod) -> list[MonthPeriod]:
    """Return every month from ``first`` to ``last`` inclusive.

    Returns an empty list when ``last`` precedes ``first``.
    """
    return list(_iter_months(first, last))


def _iter_months(first: MonthPeriod, last: MonthPeriod) -> Iterator[MonthPeriod]:
    current = first
    while current <= last:
        yield current
        current = current.next()


def months_of_year(year: int) -> list[MonthPeriod]:
    """January through December of ``year``."""
    return month_range(MonthPeriod(year, 1), MonthPeriod(year, 12))
