"""Break a unit into a sequence of smaller units, such as feet and inches."""

from __future__ import annotations

import math
from dataclasses import replace
from decimal import ROUND_DOWN, Decimal
from typing import Any, Dict, List, Optional, Sequence

from unitkernel.numeric import Number, to_fraction

from .registry import UnitRegistry
from .unit import Unit, UnitLike, convert


def _split(value: Number) -> tuple:
    """Integer part and remainder of a value, both exact."""
    if isinstance(value, Decimal):
        integer = value.to_integral_value(rounding=ROUND_DOWN)
        return integer, value - integer
    exact = to_fraction(value)
    integer = math.trunc(exact)
    return integer, exact - integer


def decompose(
    unit: Unit,
    targets: Sequence[UnitLike],
    format_options: Optional[Dict[str, Any]] = None,
    registry: Optional[UnitRegistry] = None,
) -> List[Unit]:
    """Express a unit as a greedy sequence of the target units.

    Every target but the last takes the integer part of the value and
    passes the remainder on; the last takes what is left. Zero parts are
    dropped.

    Args:
        unit: Unit to break down
        targets: Units from largest to smallest, such as ``["foot", "inch"]``
        format_options: Number options merged into the last unit
        registry: Registry to parse target names with

    Returns:
        List of units; ``[unit]`` when ``targets`` is empty

    Raises:
        IncompatibleUnitsError: If a target is not compatible with the unit

    Examples:
        >>> [(u.name, u.value) for u in decompose(new_unit("foot", 10.3), ["foot", "inch"])]
        [('foot', 10), ('inch', Fraction(18, 5))]
    """
    if not targets:
        return [unit]

    head, rest = targets[0], targets[1:]
    converted = convert(unit, head, registry)

    if not rest:
        if converted.value == 0:
            return []
        options = {**converted.format_options, **(format_options or {})}
        return [replace(converted, format_options=options)]

    integer, remainder = _split(converted.value)
    parts = [replace(converted, value=integer)] if integer != 0 else []
    return parts + decompose(replace(converted, value=remainder), rest, format_options, registry)
