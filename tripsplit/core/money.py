"""
Fixed-point money helpers.

All amounts are handled as ``Decimal``. Rounding to cents goes through
``round_half_up`` so every computation path rounds the same way.
"""
from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR
from typing import Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
HALF_CENT = Decimal("0.005")
ZERO = Decimal("0")
# Balances and remainders within this distance of zero count as settled
EPSILON = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def drift_tolerance(count: int) -> Decimal:
    """
    Largest sum drift that rounding ``count`` balances to cents can cause.

    Each balance moves by at most half a cent; the total bound is rounded up
    to a whole cent and never drops below EPSILON.
    """
    bound = (HALF_CENT * count).quantize(CENT, rounding=ROUND_CEILING)
    return max(bound, EPSILON)


def round_half_up(value: Number) -> Decimal:
    """
    Round to 2 decimal places: scale by 100, add one half, floor, scale back.

    Halves go toward positive infinity, so ``2.345 -> 2.35`` and
    ``-2.345 -> -2.34``.
    """
    scaled = to_decimal(value) * 100 + Decimal("0.5")
    cents = scaled.to_integral_value(rounding=ROUND_FLOOR)
    result = (cents * CENT).quantize(CENT)
    # Avoid "-0.00" in output
    return result if result != ZERO else ZERO.quantize(CENT)
