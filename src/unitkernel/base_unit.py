"""Canonical base-unit identities.

The identity of a parsed unit is the string formed by its reduced base
unit factors, such as ``"kilogram_meter_per_square_second"``. Two units
convert into each other when their identities are equal, or when one is
the inverse of the other.

Resolution runs in five steps: extract each token's base factors (a
token whose base unit is itself compound spreads over numerator and
denominator), sort by base unit rank, reduce powers of identical
factors, cancel factors common to both sides, and flatten to a string.
"""

from __future__ import annotations

import re
from collections import OrderedDict
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from .definitions import BASE_UNIT_RANKS, CURRENCY_PREFIX, base_unit_rank, category_for_base_unit
from .errors import UnknownBaseUnitError, UnknownUnitCategoryError
from .parsed import ParsedUnit, UnitToken, denominator_of, numerator_of
from .prefixes import POWER_NAMES, POWER_PREFIXES

# A reduced side of an identity: (atomic base unit, exponent) in rank order
Factors = List[Tuple[str, int]]

_POW = re.compile(r"^pow(\d+)$")
_PER = "_per_"


def power_name(power: int) -> str:
    """Textual power marker: ``square``, ``cubic`` or ``powN`` above cubic."""
    return POWER_NAMES.get(power, f"pow{power}")


@lru_cache(maxsize=None)
def base_factors(base_unit: str) -> Tuple[Tuple[Tuple[str, int], ...], Tuple[Tuple[str, int], ...]]:
    """Split a base unit name into atomic numerator and denominator factors.

    Examples:
        >>> base_factors("kilogram_meter_per_square_second")
        ((('kilogram', 1), ('meter', 1)), (('second', 2),))

    Raises:
        UnknownBaseUnitError: If a factor is not an atomic base unit
    """
    numerator, _, denominator = base_unit.partition(_PER)
    return _side_factors(numerator, base_unit), _side_factors(denominator, base_unit)


def _side_factors(side: str, base_unit: str) -> Tuple[Tuple[str, int], ...]:
    if not side:
        return ()

    words = side.split("_")
    factors: List[Tuple[str, int]] = []
    power = 1
    index = 0
    while index < len(words):
        word = words[index]
        pow_match = _POW.match(word)
        if word in POWER_PREFIXES:
            power = POWER_PREFIXES[word]
        elif pow_match:
            power = int(pow_match.group(1))
        elif word == CURRENCY_PREFIX and index + 1 < len(words):
            factors.append((f"{CURRENCY_PREFIX}_{words[index + 1]}", power))
            power = 1
            index += 1
        elif word in BASE_UNIT_RANKS:
            factors.append((word, power))
            power = 1
        else:
            raise UnknownBaseUnitError(f"Unknown base unit {word!r} in {base_unit!r}")
        index += 1
    return tuple(factors)


def _extract(tokens: Tuple[UnitToken, ...], numerator: Factors, denominator: Factors) -> None:
    """Append the base factors of ``tokens`` onto the two sides."""
    for token in tokens:
        conversion = token.conversion
        upper, lower = base_factors(conversion.base_name)
        for unit, power in upper:
            numerator.append((unit, power * conversion.power))
        for unit, power in lower:
            denominator.append((unit, power * conversion.power))


def _sort(factors: Factors) -> Factors:
    try:
        return sorted(factors, key=lambda factor: (base_unit_rank(factor[0]), factor[0]))
    except KeyError as e:
        raise UnknownBaseUnitError(f"Base unit {e.args[0]!r} is not ranked") from None


def reduce_powers(factors: Factors) -> Factors:
    """Combine identical adjacent factors by adding their exponents.

    Examples:
        >>> reduce_powers([("meter", 1), ("meter", 1)])
        [('meter', 2)]
        >>> reduce_powers([("meter", 2), ("meter", 1), ("second", 1)])
        [('meter', 3), ('second', 1)]
    """
    reduced: "OrderedDict[str, int]" = OrderedDict()
    for unit, power in factors:
        reduced[unit] = reduced.get(unit, 0) + power
    return [(unit, power) for unit, power in reduced.items() if power != 0]


def reduce_factors(numerator: Factors, denominator: Factors) -> Tuple[Factors, Factors]:
    """Cancel factors that appear on both sides.

    Examples:
        >>> reduce_factors([("meter", 2)], [("meter", 1)])
        ([('meter', 1)], [])
    """
    upper = dict(numerator)
    lower = dict(denominator)
    for unit in set(upper) & set(lower):
        common = min(upper[unit], lower[unit])
        upper[unit] -= common
        lower[unit] -= common

    return (
        [(unit, upper[unit]) for unit, _ in numerator if upper[unit] > 0],
        [(unit, lower[unit]) for unit, _ in denominator if lower[unit] > 0],
    )


def flatten(numerator: Factors, denominator: Factors) -> str:
    """Join reduced factors into an identity string."""
    def side(factors: Factors) -> str:
        return "_".join(
            unit if power == 1 else f"{power_name(power)}_{unit}" for unit, power in factors
        )

    upper = side(numerator)
    if not denominator:
        return upper
    lower = side(denominator)
    return f"{upper}_per_{lower}" if upper else f"per_{lower}"


def _resolve(parsed: ParsedUnit) -> Tuple[Factors, Factors]:
    """Extract, merge, sort and power-reduce both sides of a parsed unit."""
    numerator: Factors = []
    denominator: Factors = []
    _extract(numerator_of(parsed), numerator, denominator)
    # The denominator's own factors land on the opposite sides
    _extract(denominator_of(parsed), denominator, numerator)
    return reduce_powers(_sort(numerator)), reduce_powers(_sort(denominator))


def _canonical(numerator: Factors, denominator: Factors) -> str:
    unreduced = flatten(numerator, denominator)
    # Known compound base units, such as meter_per_cubic_meter, stay as they are
    if unreduced in BASE_UNIT_RANKS:
        return unreduced
    return flatten(*reduce_factors(numerator, denominator))


def canonical_base_unit(parsed: ParsedUnit) -> str:
    """Return the canonical base-unit identity of a parsed unit.

    Args:
        parsed: Result of parsing a unit name

    Returns:
        Identity string, for example ``"meter"`` for ``square_meter_per_meter``

    Raises:
        UnknownBaseUnitError: If a token's base unit is not ranked
    """
    return _canonical(*_resolve(parsed))


def inverted_base_unit(parsed: ParsedUnit) -> str:
    """Return the identity of the reciprocal of a parsed unit."""
    numerator, denominator = _resolve(parsed)
    return _canonical(denominator, numerator)


def directly_compatible(parsed_1: ParsedUnit, parsed_2: ParsedUnit) -> bool:
    return canonical_base_unit(parsed_1) == canonical_base_unit(parsed_2)


def inversely_compatible(parsed_1: ParsedUnit, parsed_2: ParsedUnit) -> bool:
    return inverted_base_unit(parsed_1) == canonical_base_unit(parsed_2)


def compatible(parsed_1: ParsedUnit, parsed_2: ParsedUnit) -> bool:
    """Whether two parsed units convert into each other, directly or inverted."""
    return directly_compatible(parsed_1, parsed_2) or inversely_compatible(parsed_1, parsed_2)


def unit_category(parsed: ParsedUnit, unit_name: Optional[str] = None) -> str:
    """Return the category (``length``, ``mass``, ...) of a parsed unit.

    Raises:
        UnknownUnitCategoryError: If the identity belongs to no category
    """
    base_unit = canonical_base_unit(parsed)
    category = category_for_base_unit(base_unit)
    if category is None:
        raise UnknownUnitCategoryError(
            f"The unit {unit_name or base_unit!r} with base unit {base_unit!r} "
            "does not belong to a known category"
        )
    return category


def base_unit_categories() -> Dict[str, str]:
    """Mapping of category name to its base-unit identity."""
    categories: Dict[str, str] = {}
    for base_unit in BASE_UNIT_RANKS:
        category = category_for_base_unit(base_unit)
        if category is not None:
            categories.setdefault(category, base_unit)
    return categories
