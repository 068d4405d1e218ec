"""Numeric value model: int, float, Decimal and Fraction.

Conversion math runs on exact Fractions. Results are coerced back to a
type matching the caller's input, and binary operations promote both
operands to the more precise type: Decimal > Fraction > float > int.
"""

from __future__ import annotations

import math
from decimal import (
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    ROUND_UP,
    Decimal,
)
from fractions import Fraction
from typing import Callable, Literal, Tuple, Union

from .errors import InvalidUnitValueError

Number = Union[int, float, Decimal, Fraction]

RoundingMode = Literal["down", "up", "ceiling", "floor", "half_even", "half_up", "half_down"]

ROUNDING_MODES = {
    "down": ROUND_DOWN,
    "up": ROUND_UP,
    "ceiling": ROUND_CEILING,
    "floor": ROUND_FLOOR,
    "half_even": ROUND_HALF_EVEN,
    "half_up": ROUND_HALF_UP,
    "half_down": ROUND_HALF_DOWN,
}

_TYPE_RANK = {int: 0, float: 1, Fraction: 2, Decimal: 3}


def is_number(value: object) -> bool:
    return isinstance(value, (int, float, Decimal, Fraction)) and not isinstance(value, bool)


def validate_number(value: object) -> Number:
    """Return ``value`` if it is a finite supported number.

    Raises:
        InvalidUnitValueError: For booleans, non-numbers, NaN or infinity
    """
    if not is_number(value):
        raise InvalidUnitValueError(
            f"Unit value must be an int, float, Decimal or Fraction. Received {value!r}"
        )
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidUnitValueError(f"Unit value must be finite. Received {value!r}")
    if isinstance(value, Decimal) and not value.is_finite():
        raise InvalidUnitValueError(f"Unit value must be finite. Received {value!r}")
    return value  # type: ignore[return-value]


def to_fraction(value: Number) -> Fraction:
    """Exact rational form of a value.

    Floats go through their shortest repr, so ``10.3`` becomes ``103/10``
    rather than the nearest binary fraction.
    """
    if isinstance(value, Fraction):
        return value
    if isinstance(value, float):
        return Fraction(repr(value))
    return Fraction(value)


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, Fraction):
        return Decimal(value.numerator) / Decimal(value.denominator)
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def coerce(result: Fraction, like: Number) -> Number:
    """Coerce an exact result to match the type of the original input.

    Decimal inputs give Decimals. Otherwise integral results give ints,
    floats give floats, and ints or Fractions stay exact Fractions.
    """
    if isinstance(like, Decimal):
        return to_decimal(result)
    if result.denominator == 1:
        return int(result.numerator)
    if isinstance(like, float):
        return float(result)
    return result


def promote(value_1: Number, value_2: Number) -> Tuple[Number, Number]:
    """Promote two values to the more precise of their two types."""
    rank = max(_TYPE_RANK[type(value_1)], _TYPE_RANK[type(value_2)])
    if rank == 3:
        return to_decimal(value_1), to_decimal(value_2)
    if rank == 2:
        return to_fraction(value_1), to_fraction(value_2)
    if rank == 1:
        return float(value_1), float(value_2)
    return value_1, value_2


def combine(op: Callable[[Number, Number], Number], value_1: Number, value_2: Number) -> Number:
    """Apply a binary operation after promoting both operands."""
    a, b = promote(value_1, value_2)
    return op(a, b)


def add(value_1: Number, value_2: Number) -> Number:
    return combine(lambda a, b: a + b, value_1, value_2)


def sub(value_1: Number, value_2: Number) -> Number:
    return combine(lambda a, b: a - b, value_1, value_2)


def mul(value_1: Number, value_2: Number) -> Number:
    return combine(lambda a, b: a * b, value_1, value_2)


def div(value_1: Number, value_2: Number) -> Number:
    """Divide, keeping integer division exact.

    Examples:
        >>> div(10, 2)
        5
        >>> div(1, 3)
        Fraction(1, 3)
    """
    a, b = promote(value_1, value_2)
    if isinstance(a, int) and isinstance(b, int):
        quotient = Fraction(a, b)
        return int(quotient) if quotient.denominator == 1 else quotient
    return a / b


def compare(value_1: Number, value_2: Number) -> int:
    """Three-way comparison returning -1, 0 or 1."""
    a, b = to_fraction(value_1), to_fraction(value_2)
    return (a > b) - (a < b)


def _round_fraction(value: Fraction, mode: str) -> int:
    floor = math.floor(value)
    if value == floor:
        return floor
    ceiling = floor + 1
    if mode == "floor":
        return floor
    if mode == "ceiling":
        return ceiling
    if mode == "down":
        return floor if value > 0 else ceiling
    if mode == "up":
        return ceiling if value > 0 else floor

    remainder = value - floor
    half = Fraction(1, 2)
    if remainder > half:
        return ceiling
    if remainder < half:
        return floor
    if mode == "half_up":
        return ceiling if value > 0 else floor
    if mode == "half_down":
        return floor if value > 0 else ceiling
    return floor if floor % 2 == 0 else ceiling


def round_value(value: Number, places: int = 0, mode: str = "half_up") -> Number:
    """Round a value to ``places`` decimal places.

    Args:
        value: Number to round
        places: Decimal places, may be negative to round to tens
        mode: One of ``down``, ``up``, ``ceiling``, ``floor``,
            ``half_even``, ``half_up`` or ``half_down``

    Returns:
        Rounded value of the same type (ints stay ints)

    Raises:
        ValueError: If the mode is unknown

    Examples:
        >>> round_value(1031.61, 1)
        1031.6
        >>> round_value(1031.61, 1, "up")
        1031.7
    """
    if mode not in ROUNDING_MODES:
        raise ValueError(f"Unknown rounding mode {mode!r}. Use one of {sorted(ROUNDING_MODES)}")

    if isinstance(value, int) and places >= 0:
        return value

    if isinstance(value, (Decimal, float)):
        rounded = to_decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUNDING_MODES[mode])
        return float(rounded) if isinstance(value, float) else rounded

    scale = Fraction(10) ** places
    rounded_fraction = Fraction(_round_fraction(to_fraction(value) * scale, mode)) / scale
    if isinstance(value, int):
        return int(rounded_fraction)
    return rounded_fraction


def trunc_value(value: Number) -> Number:
    """Truncate toward zero, keeping Decimals as Decimals."""
    if isinstance(value, Decimal):
        return value.to_integral_value(rounding=ROUND_DOWN)
    return math.trunc(value)


def round_to_increment(value: Number, increment: Number, mode: str = "half_even") -> Number:
    """Round to the nearest multiple of ``increment`` (for example 10 or 50)."""
    step = to_fraction(increment)
    steps = _round_fraction(to_fraction(value) / step, mode)
    return coerce(steps * step, value)
