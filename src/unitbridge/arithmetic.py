"""Arithmetic on unit values.

Addition and subtraction convert the second operand into the first's
unit. Multiplication and division do the same for compatible units, and
otherwise build a new compound unit from the tokens of both operands.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from typing import Callable, List, Literal, Optional, Tuple, Union

import structlog

from unitkernel import numeric
from unitkernel.base_unit import compatible as parsed_compatible
from unitkernel.errors import IncompatibleUnitsError, ReciprocalUnitError, UnitDivisionByZeroError
from unitkernel.numeric import Number, RoundingMode, is_number
from unitkernel.parsed import UnitToken, denominator_of, numerator_of

from .registry import UnitRegistry
from .unit import Unit, convert, new_unit

logger = structlog.get_logger(__name__)

Comparison = Literal["lt", "eq", "gt"]

# Precision both sides are rounded to before comparing converted units
COMPARE_PLACES = 1

_ORDERING = {-1: "lt", 0: "eq", 1: "gt"}


def _same_unit(unit_1: Unit, unit_2: Unit) -> Unit:
    """``unit_2`` expressed in ``unit_1``'s unit.

    Raises:
        IncompatibleUnitsError: If the units do not share a base unit
    """
    if unit_1.name == unit_2.name:
        return unit_2
    if not parsed_compatible(unit_1.base_conversion, unit_2.base_conversion):
        raise IncompatibleUnitsError(unit_1.name, unit_2.name)
    return convert(unit_2, unit_1.name)


def _combine(op: Callable[[Number, Number], Number], unit_1: Unit, unit_2: Unit) -> Unit:
    other = _same_unit(unit_1, unit_2)
    return replace(unit_1, value=op(unit_1.value, other.value))


def add(unit_1: Unit, unit_2: Unit) -> Unit:
    """Add two compatible units, keeping the first unit.

    Raises:
        IncompatibleUnitsError: If the units are not compatible

    Examples:
        >>> add(new_unit("foot", 1), new_unit("mile", 1)).value
        5281
    """
    return _combine(numeric.add, unit_1, unit_2)


def sub(unit_1: Unit, unit_2: Unit) -> Unit:
    """Subtract a compatible unit from another, keeping the first unit.

    Raises:
        IncompatibleUnitsError: If the units are not compatible
    """
    return _combine(numeric.sub, unit_1, unit_2)


def _words(tokens: Tuple[UnitToken, ...]) -> List[str]:
    """Expand tokens into repeated single-power words, for example ``square_meter`` into two ``meter``."""
    words: List[str] = []
    for token in tokens:
        word = token.unit or token.name
        if token.multiplier != 1:
            word = f"{token.multiplier}_{word}"
        words.extend([word] * token.power)
    return words


def _side(words: Counter) -> str:
    # A count such as 100_gram only parses at the start of a side
    ordered = sorted(words.elements(), key=lambda word: not word[:1].isdigit())
    return "_".join(ordered)


def _product_name(
    numerator: List[str], denominator: List[str], unit_1: Unit, unit_2: Unit, invert: bool
) -> str:
    top, bottom = Counter(numerator), Counter(denominator)
    common = top & bottom
    top, bottom = top - common, bottom - common

    if not top:
        raise ReciprocalUnitError(unit_1.name, unit_2.name, "Dividing" if invert else "Multiplying")
    if not bottom:
        return _side(top)
    return f"{_side(top)}_per_{_side(bottom)}"


def _algebra(unit_1: Unit, unit_2: Unit, invert: bool) -> str:
    numerator_2 = _words(numerator_of(unit_2.base_conversion))
    denominator_2 = _words(denominator_of(unit_2.base_conversion))
    if invert:
        numerator_2, denominator_2 = denominator_2, numerator_2

    return _product_name(
        _words(numerator_of(unit_1.base_conversion)) + numerator_2,
        _words(denominator_of(unit_1.base_conversion)) + denominator_2,
        unit_1,
        unit_2,
        invert,
    )


def _scale(
    op: Callable[[Number, Number], Number],
    unit_1: Unit,
    unit_2: Union[Unit, Number],
    invert: bool,
    registry: Optional[UnitRegistry],
) -> Unit:
    if is_number(unit_2):
        return replace(unit_1, value=op(unit_1.value, unit_2))  # type: ignore[arg-type]

    assert isinstance(unit_2, Unit)
    if unit_1.name == unit_2.name or parsed_compatible(unit_1.base_conversion, unit_2.base_conversion):
        return _combine(op, unit_1, unit_2)

    name = _algebra(unit_1, unit_2, invert)
    logger.debug("Synthesized unit", unit_1=unit_1.name, unit_2=unit_2.name, unit=name)
    return new_unit(
        name,
        op(unit_1.value, unit_2.value),
        format_options=unit_1.format_options,
        registry=registry,
    )


def mul(unit_1: Unit, unit_2: Union[Unit, Number], registry: Optional[UnitRegistry] = None) -> Unit:
    """Multiply a unit by a number or by another unit.

    Compatible units multiply their values in the first unit. Other
    units combine into a compound unit: ``meter`` times ``meter_per_second``
    gives ``square_meter_per_second``.

    Raises:
        ReciprocalUnitError: If the product would have no numerator
        UnsupportedPowerError: If a unit would be raised above cubic
    """
    return _scale(numeric.mul, unit_1, unit_2, False, registry)


def div(unit_1: Unit, unit_2: Union[Unit, Number], registry: Optional[UnitRegistry] = None) -> Unit:
    """Divide a unit by a number or by another unit.

    Raises:
        UnitDivisionByZeroError: If the divisor is zero
        ReciprocalUnitError: If the quotient would have no numerator,
            as for ``meter`` divided by ``square_meter``
        UnsupportedPowerError: If a unit would be raised above cubic

    Examples:
        >>> speed = div(new_unit("meter", 10), new_unit("second", 2))
        >>> speed.name, speed.value
        ('meter_per_second', 5)
    """
    try:
        return _scale(numeric.div, unit_1, unit_2, True, registry)
    except ZeroDivisionError as e:
        raise UnitDivisionByZeroError(f"Cannot divide {unit_1.name!r} by zero") from e


def round(unit: Unit, places: int = 0, mode: RoundingMode = "half_up") -> Unit:
    """Round the value of a unit; the unit itself is unchanged.

    Args:
        unit: Unit to round
        places: Decimal places, may be negative
        mode: ``down``, ``up``, ``ceiling``, ``floor``, ``half_even``,
            ``half_up`` or ``half_down``

    Examples:
        >>> round(new_unit("meter", 1031.61), 1).value
        1031.6
    """
    return replace(unit, value=numeric.round_value(unit.value, places, mode))


def trunc(unit: Unit) -> Unit:
    """Truncate the value of a unit toward zero."""
    return replace(unit, value=numeric.trunc_value(unit.value))


def compare(unit_1: Unit, unit_2: Unit) -> Comparison:
    """Compare two compatible units.

    Units with different names are converted and both rounded to one
    decimal place (half even) so that conversion noise compares equal.

    Returns:
        ``"lt"``, ``"eq"`` or ``"gt"``

    Raises:
        IncompatibleUnitsError: If the units are not compatible

    Examples:
        >>> compare(new_unit("foot", 3), new_unit("yard", 1))
        'eq'
    """
    if unit_1.name == unit_2.name:
        return _ORDERING[numeric.compare(unit_1.value, unit_2.value)]  # type: ignore[return-value]

    other = _same_unit(unit_1, unit_2)
    value_1 = numeric.round_value(unit_1.value, COMPARE_PLACES, "half_even")
    value_2 = numeric.round_value(other.value, COMPARE_PLACES, "half_even")
    return _ORDERING[numeric.compare(value_1, value_2)]  # type: ignore[return-value]
