"""Exact money arithmetic.

Every amount is carried as ``Decimal`` so chained operations never pick up
binary floating-point drift. Floats coming from callers are converted through
``str()`` first, so ``0.1`` becomes ``Decimal("0.1")`` and not its binary
expansion. Rounding follows the IRS convention (half away from zero).
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
DOLLAR = Decimal("1")
ZERO = Decimal("0")

Number = Decimal | int | float | str


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_to_cents(amount: Number) -> Decimal:
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def round_to_whole_dollar(amount: Number) -> Decimal:
    """Round to the nearest whole dollar (IRS rounding rule)."""
    return to_decimal(amount).quantize(DOLLAR, rounding=ROUND_HALF_UP)


def add(a: Number, b: Number) -> Decimal:
    return round_to_cents(to_decimal(a) + to_decimal(b))


def subtract(a: Number, b: Number) -> Decimal:
    return round_to_cents(to_decimal(a) - to_decimal(b))


def apply_rate(amount: Number, rate: Number) -> Decimal:
    """Return ``amount * rate`` rounded to the cent. Rate is a fraction (0.22 = 22%)."""
    return round_to_cents(to_decimal(amount) * to_decimal(rate))


def clamp_min(value: Number, floor: Number) -> Decimal:
    value, floor = to_decimal(value), to_decimal(floor)
    return floor if value < floor else value


def sum_all(values: Iterable[Number]) -> Decimal:
    total = ZERO
    for value in values:
        total += round_to_cents(value)
    return total
