"""Fixed-point day quantities.

Every balance, accrual and deduction is a ``Decimal`` quantized to 0.001 days,
the same scale the balance table stores, so sums never drift across periods.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

DAYS_QUANTUM = Decimal("0.001")
ZERO_DAYS = Decimal("0.000")


def to_days(value: Decimal | int | str | float) -> Decimal:
    """Convert ``value`` to a day quantity quantized to three decimal places.

    Floats go through ``str`` first so that ``1.1`` becomes ``1.100`` rather
    than its binary expansion.
    """
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(DAYS_QUANTUM, rounding=ROUND_HALF_UP)
