"""
Money helpers.

Every settlement boundary rounds to cents, and equality is judged
within one cent.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union


CENT = Decimal("0.01")
TOLERANCE = Decimal("0.01")
ZERO = Decimal("0")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert without float artifacts (0.1 stays 0.1)."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def round_money(value: Number) -> Decimal:
    """Round to 2 places, halves away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def is_settled(value: Number) -> bool:
    """True when the amount is within one cent of zero."""
    return abs(to_decimal(value)) <= TOLERANCE


def equal_share(total: Number, count: int) -> Decimal:
    """Unrounded per-person share; zero when there is nobody to share."""
    if count <= 0:
        return ZERO
    return to_decimal(total) / count
