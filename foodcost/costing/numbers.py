"""Numeric sanitisation and rounding used by every costing calculation."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext


def ensure_finite(value: object) -> float:
    """Coerce to float; NaN, infinities and non-numbers become 0.0."""
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def clamp_non_negative(value: float) -> float:
    return 0.0 if value < 0 else value


def safe_number(value: object) -> float:
    """Finite, non-negative float or 0.0."""
    return clamp_non_negative(ensure_finite(value))


def round_half_away(value: float, places: int = 2) -> float:
    """Round to ``places`` decimals, ties away from zero.

    ``round()`` uses banker's rounding, which would turn 0.125 into 0.12.
    """
    if not math.isfinite(value):
        return value
    number = Decimal(str(value))
    quantum = Decimal(1).scaleb(-places)
    # quantize() fails once the result needs more digits than the context holds
    with localcontext() as ctx:
        ctx.prec = max(28, number.adjusted() + places + 2)
        return float(number.quantize(quantum, rounding=ROUND_HALF_UP))
